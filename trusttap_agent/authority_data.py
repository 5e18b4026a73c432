"""Curated set of widely recognized, high-authority domains.

Replace at deploy time with TRUSTTAP_TOP_DOMAINS_FILE (one domain per line,
``#`` starts a comment) without touching the classification logic.
"""
from __future__ import annotations

from pathlib import Path

TOP_DOMAINS: frozenset[str] = frozenset({
    # platforms & media
    "google.com", "youtube.com", "facebook.com", "twitter.com", "instagram.com", "wikipedia.org",
    "amazon.com", "microsoft.com", "apple.com", "netflix.com", "reddit.com", "linkedin.com",
    "pinterest.com", "tiktok.com", "whatsapp.com", "telegram.org", "discord.com", "twitch.tv",
    "github.com", "stackoverflow.com", "adobe.com", "spotify.com", "soundcloud.com", "vimeo.com",
    "dailymotion.com", "imgur.com", "flickr.com",
    # commerce & travel
    "paypal.com", "stripe.com", "shopify.com", "ebay.com", "etsy.com", "alibaba.com",
    "booking.com", "airbnb.com", "uber.com", "lyft.com", "doordash.com", "grubhub.com",
    "yelp.com", "tripadvisor.com", "expedia.com",
    # banking & payments
    "bankofamerica.com", "wellsfargo.com", "chase.com", "citibank.com", "capitalone.com",
    "visa.com", "mastercard.com", "americanexpress.com", "discover.com", "coinbase.com",
    "binance.com", "kraken.com", "robinhood.com", "etrade.com", "fidelity.com", "schwab.com",
    "vanguard.com", "blackrock.com", "goldmansachs.com", "morganstanley.com", "jpmorgan.com",
    "citigroup.com", "usbank.com", "pnc.com", "truist.com", "regions.com", "key.com",
    "huntington.com", "comerica.com", "synchrony.com", "ally.com", "usaa.com", "navyfederal.org",
    "penfed.org", "square.com", "venmo.com", "cashapp.com", "zelle.com",
    # insurance & health
    "statefarm.com", "geico.com", "progressive.com", "allstate.com", "libertymutual.com",
    "farmers.com", "nationwide.com", "travelers.com", "chubb.com", "aig.com", "metlife.com",
    "prudential.com", "newyorklife.com", "massmutual.com", "northwesternmutual.com",
    "aflac.com", "cigna.com", "anthem.com", "humana.com", "kaiserpermanente.org", "aetna.com",
    "uhc.com", "molina.com", "centene.com",
    # developer & cloud
    "wordpress.com", "cloudflare.com", "dropbox.com", "zoom.us", "slack.com", "notion.so",
    "woocommerce.com", "bigcommerce.com", "squarespace.com", "wix.com", "godaddy.com",
    "namecheap.com", "digitalocean.com", "linode.com", "heroku.com", "netlify.com",
    "vercel.com", "render.com", "fly.io", "supabase.com", "firebase.com", "mongodb.com",
    "redis.com", "elastic.com", "datadog.com", "newrelic.com", "sentry.io", "mixpanel.com",
    "amplitude.com", "segment.com", "monday.com", "asana.com", "trello.com", "atlassian.com",
})


def load_top_domains(path: str | Path) -> frozenset[str]:
    domains: set[str] = set()
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        entry = line.split("#", 1)[0].strip().lower()
        if entry:
            domains.add(entry)
    return frozenset(domains)
