"""Ibiza club listing pages covering the trip dates (Jun 27 - Jul 3, 2026).

Each venue lists its official calendar first and an Ibiza Spotlight page as
fallback. Spotlight pages list every club, so their hints tell the model to
keep only the venue's own nights.
"""

from nightlife_scraper.config.sources import SourceConfig

# Two Spotlight pages are needed: end of June + start of July
SPOTLIGHT_URLS = (
    "https://www.ibiza-spotlight.com/night/events/2026/06?daterange=27/06/2026-30/06/2026",
    "https://www.ibiza-spotlight.com/night/events/2026/07?daterange=01/07/2026-03/07/2026",
)

_SPOTLIGHT_HINT = (
    "If this is an Ibiza Spotlight listing, it covers many clubs: only keep "
    "events whose venue is this club. Dates appear as day headings above the "
    "event cards."
)

VENUES: list[SourceConfig] = [
    SourceConfig(
        name="Hï Ibiza",
        urls=(
            "https://www.hiibiza.com/events",
            SPOTLIGHT_URLS[0],
        ),
        hints=(
            "Events are cards grouped by weekday residency (e.g. 'Glitterbox', "
            "'Dom Whiting'). Each card has a date like 'Sat 27 Jun'. "
            "Ticket links point to tickets.hiibiza.com. " + _SPOTLIGHT_HINT
        ),
    ),
    SourceConfig(
        name="Ushuaïa Ibiza",
        urls=(
            "https://www.theushuaiaexperience.com/en/club/events",
            SPOTLIGHT_URLS[0],
        ),
        hints=(
            "Open-air daytime club. Event data is often in a __NUXT__ state "
            "object with 'date' and 'name' keys. Doors usually 17:00. "
            + _SPOTLIGHT_HINT
        ),
    ),
    SourceConfig(
        name="Pacha Ibiza",
        urls=(
            "https://pacha.com/ibiza/events",
            SPOTLIGHT_URLS[1],
        ),
        hints=(
            "Listing uses JSON-LD Event objects; prefer startDate from JSON-LD. "
            "Party brand names (e.g. 'Solomun +1', 'Music On') are the titles. "
            + _SPOTLIGHT_HINT
        ),
    ),
    SourceConfig(
        name="Amnesia",
        urls=(
            "https://www.amnesia.es/en/events",
            SPOTLIGHT_URLS[0],
        ),
        hints=(
            "Dates are shown as DD/MM. The year is 2026 unless stated. Include "
            "the headliner DJs in the title when listed. " + _SPOTLIGHT_HINT
        ),
    ),
    SourceConfig(
        name="DC-10",
        urls=(
            "https://www.dc10ibiza.com/events",
            SPOTLIGHT_URLS[0],
        ),
        hints=(
            "Mostly 'Circoloco' Mondays. Lineups are long lists of DJ names: "
            "put them in the description, keep the title short. "
            + _SPOTLIGHT_HINT
        ),
    ),
    SourceConfig(
        name="UNVRS",
        urls=(
            "https://unvrs.com/en/events",
            SPOTLIGHT_URLS[1],
        ),
        hints=(
            "Calendar is rendered client-side; look for embedded JSON with an "
            "\"events\" key. Times are 23:00 - 06:00 by default. "
            + _SPOTLIGHT_HINT
        ),
    ),
    SourceConfig(
        name="Eden Ibiza",
        urls=(
            "https://www.edenibiza.com/events",
            SPOTLIGHT_URLS[1],
        ),
        hints=(
            "San Antonio club. Events have a date line such as 'Thursday 2nd "
            "July' above the title. " + _SPOTLIGHT_HINT
        ),
    ),
]
