"""
Canonical venue list.

Fallback venue set used when no venue feed is configured or the venue feed
cannot be fetched. key is the stable slug used as venue_id.
"""

from typing import NamedTuple

from event_catalog.normalization.text import slugify


class CanonicalVenue(NamedTuple):
    key: str
    name: str
    handle: str
    venue_type: str


def _venue(name: str, handle: str, venue_type: str) -> CanonicalVenue:
    return CanonicalVenue(key=slugify(name), name=name, handle=handle, venue_type=venue_type)


CANONICAL_VENUES: tuple[CanonicalVenue, ...] = (
    _venue("Lux Frágil", "luxfragil", "Club"),
    _venue("Musicbox Lisboa", "musicboxlisboa", "Club / Venue"),
    _venue("Ministerium", "ministeriumclub", "Club"),
    _venue("K Urban Beach", "k_urban_beach", "Club"),
    _venue("Village Underground", "vulisboa", "Cultural venue"),
    _venue("B.Leza", "clube_b.leza", "Club"),
    _venue("Rive Rouge", "riverougelx", "Club"),
    _venue("Nada Temple", "nadatemple", "Club"),
    _venue("Damas", "damas_lx", "Bar / Venue"),
    _venue("Tokyo Lisboa", "tokyolisboa", "Club"),
    _venue("Europa Club", "europaclub_lisboa", "Club"),
    _venue("Casa Independente", "casaindependente", "Cultural venue"),
    _venue("Roterdão", "roterdaoclub", "Club"),
    _venue("Lust in Rio", "lustinrio.oficial", "Club"),
    _venue("Harbour Lisbon", "harbour.lisbon", "Club"),
    _venue("Clube Ferroviário", "clubeferroviario", "Cultural venue"),
    _venue("TNDM II", "tndmii", "Theatre"),
    _venue("Teatro São Luiz", "teatrosaoluiz", "Theatre"),
    _venue("TBA", "tba_lisboa", "Theatre"),
    _venue("Trindade", "teatrodatrindade", "Theatre"),
    _venue("Lisboa Comedy Club", "lisboacomedyclub", "Comedy club"),
    _venue("Teatro Maria Matos", "teatromariamatos", "Theatre"),
    _venue("Cinemateca", "cinematecaportuguesa", "Cinema"),
    _venue("Cinema São Jorge", "cinemasaojorge", "Cinema"),
    _venue("Cinema Ideal", "cinemaideal", "Indie cinema"),
    _venue("IndieLisboa", "indielisboa", "Festival"),
    _venue("MAAT", "maat_lisboa", "Museum"),
    _venue("Gulbenkian", "fcgulbenkian", "Cultural centre"),
    _venue("Culturgest", "culturgest", "Cultural centre"),
    _venue("Museu do Fado", "museudofado", "Museum"),
    _venue("ZDB", "galeriazdb", "Gallery"),
    _venue("Underdogs", "underdogsgallery", "Gallery"),
    _venue("Fábrica Braço Prata", "fabricabracodeprata", "Cultural venue"),
    _venue("Anjos70", "anjos70", "Cultural venue"),
    _venue("LAV", "lisboaaovivo", "Venue"),
    _venue("RCA Club", "rcaclub", "Venue"),
    _venue("BOTA", "botalx", "Bar / Venue"),
    _venue("Sirigaita", "sirigaitalx", "Venue"),
    _venue("A Barraca", "abarracateatro", "Theatre"),
    _venue("DocLisboa", "doclisboa", "Festival"),
    _venue("CCB", "ccbbelem", "Cultural centre"),
    _venue("Kunsthalle", "kunsthallelissabon", "Gallery"),
    _venue("Hangar", "hangarlisboa", "Art centre"),
    _venue("Jardins do Bombarda", "jardinsdobombarda", "Cultural venue"),
    _venue("Cineteatro Turim", "cineteatroturim", "Cinema"),
)


def get_canonical_venue(key: str) -> CanonicalVenue | None:
    """Look up a canonical venue by its slug key."""
    for venue in CANONICAL_VENUES:
        if venue.key == key:
            return venue
    return None
