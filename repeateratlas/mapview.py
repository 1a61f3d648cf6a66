"""Map view models: markers, link lines and nearby-repeater listings."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from .geo import Point, distance_km

NEARBY_RADIUS_METERS = 50_000.0


@dataclass(frozen=True)
class RepeaterSite:
    """A stored repeater system as far as the map needs it."""

    id: int
    call_sign: str
    status: str
    point: Optional[Point] = None


@dataclass(frozen=True)
class LinkEdge:
    """A link between two repeater systems, by id."""

    repeater_a_id: int
    repeater_b_id: int
    note: str = ""


@dataclass
class MapRepeater:
    """A repeater marker on a map."""

    call_sign: str
    point: Point
    status: str
    services: list[str] = field(default_factory=list)
    is_external: bool = False


@dataclass(frozen=True)
class MapLink:
    """A line drawn between two linked repeater markers."""

    from_point: Point
    to_point: Point
    from_call_sign: str
    to_call_sign: str


@dataclass
class MapContext:
    """Map centred on a repeater, showing everything within a radius."""

    center: Point
    radius_meters: int
    repeaters: list[MapRepeater]


@dataclass
class OrganizationMapContext:
    """Map of an organisation's repeaters and the links touching them."""

    repeaters: list[MapRepeater]
    links: list[MapLink]


@dataclass
class LinkedMapContext:
    """Map of a linked repeater network."""

    repeaters: list[MapRepeater]
    links: list[MapLink]


@dataclass(frozen=True)
class NearbyRepeaterItem:
    """A repeater near another one, with its distance."""

    call_sign: str
    distance_km: float
    distance_label: str


def map_repeater_for_display(site: RepeaterSite, is_external: bool) -> Optional[MapRepeater]:
    """Return a marker for ``site``, or ``None`` when it has no position."""
    if site.point is None:
        return None
    return MapRepeater(
        call_sign=site.call_sign,
        point=site.point,
        status=site.status,
        services=[],
        is_external=is_external,
    )


def build_map_links(
    map_repeaters_by_id: Mapping[int, MapRepeater], links: Iterable[LinkEdge]
) -> list[MapLink]:
    """Draw a line for every link whose both ends have a marker."""
    result = []
    for link in links:
        a = map_repeaters_by_id.get(link.repeater_a_id)
        b = map_repeaters_by_id.get(link.repeater_b_id)
        if a is not None and b is not None:
            result.append(
                MapLink(
                    from_point=a.point,
                    to_point=b.point,
                    from_call_sign=a.call_sign,
                    to_call_sign=b.call_sign,
                )
            )
    return result


def finalize_map_repeaters(map_repeaters_by_id: Mapping[int, MapRepeater]) -> list[MapRepeater]:
    """Return the markers sorted by call sign."""
    return sorted(map_repeaters_by_id.values(), key=lambda repeater: repeater.call_sign)


def nearby_repeaters(
    center: Point,
    candidates: Iterable[RepeaterSite],
    radius_meters: float = NEARBY_RADIUS_METERS,
) -> tuple[MapContext, list[NearbyRepeaterItem]]:
    """Build the nearby map and a list sorted by distance, then call sign."""
    markers: list[MapRepeater] = []
    listing: list[NearbyRepeaterItem] = []
    for candidate in candidates:
        if candidate.point is None:
            continue
        distance = distance_km(center, candidate.point)
        if distance * 1000.0 > radius_meters:
            continue
        listing.append(
            NearbyRepeaterItem(
                call_sign=candidate.call_sign,
                distance_km=distance,
                distance_label=f"{distance:.1f} km",
            )
        )
        markers.append(
            MapRepeater(
                call_sign=candidate.call_sign,
                point=candidate.point,
                status=candidate.status,
            )
        )
    listing.sort(key=lambda item: (item.distance_km, item.call_sign))
    context = MapContext(center=center, radius_meters=int(radius_meters), repeaters=markers)
    return context, listing


def home_map_repeaters(
    sites: Iterable[RepeaterSite], kinds: Iterable[tuple[int, str]]
) -> list[MapRepeater]:
    """Markers for every positioned repeater with its sorted, distinct service kinds."""
    kinds_by_id: dict[int, set[str]] = defaultdict(set)
    for repeater_id, kind in kinds:
        kinds_by_id[repeater_id].add(kind)

    markers = []
    for site in sites:
        if site.point is None:
            continue
        markers.append(
            MapRepeater(
                call_sign=site.call_sign,
                point=site.point,
                status=site.status,
                services=sorted(kinds_by_id.get(site.id, ())),
            )
        )
    return markers


def organization_map(
    club_sites: Iterable[RepeaterSite],
    linked_sites: Iterable[RepeaterSite],
    links: Iterable[LinkEdge],
) -> Optional[OrganizationMapContext]:
    """Map of a club's repeaters plus linked repeaters outside the club, marked external."""
    map_repeaters_by_id: dict[int, MapRepeater] = {}
    club_ids: set[int] = set()

    for site in club_sites:
        if site.id in club_ids:
            continue
        club_ids.add(site.id)
        marker = map_repeater_for_display(site, False)
        if marker is not None:
            map_repeaters_by_id[site.id] = marker

    map_links: list[MapLink] = []
    if club_ids:
        club_links = [
            link
            for link in links
            if link.repeater_a_id in club_ids or link.repeater_b_id in club_ids
        ]
        linked_ids = {link.repeater_a_id for link in club_links} | {
            link.repeater_b_id for link in club_links
        }
        for site in linked_sites:
            if site.id not in linked_ids or site.id in map_repeaters_by_id:
                continue
            marker = map_repeater_for_display(site, site.id not in club_ids)
            if marker is not None:
                map_repeaters_by_id[site.id] = marker
        map_links = build_map_links(map_repeaters_by_id, club_links)

    repeaters = finalize_map_repeaters(map_repeaters_by_id)
    if not repeaters:
        return None
    return OrganizationMapContext(repeaters=repeaters, links=map_links)