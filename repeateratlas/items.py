"""Repeater view models that group a repeater's services by kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .geo import MaidenheadLocator, Point
from .services import (
    AmService,
    AprsService,
    C4fmService,
    DmrService,
    DstarService,
    FmBandwidth,
    FmService,
    Frequency,
    ServiceRecord,
    SsbService,
    Tone,
    from_record,
)


@dataclass(frozen=True)
class FmServiceItem:
    label: str
    enabled: bool
    rx_hz: Frequency
    tx_hz: Frequency
    bandwidth: FmBandwidth
    rx_tone: Tone
    tx_tone: Tone
    note: str


@dataclass(frozen=True)
class DmrServiceItem:
    label: str
    enabled: bool
    rx_hz: Frequency
    tx_hz: Frequency
    color_code: int
    dmr_repeater_id: Optional[int]
    network: str
    note: str


@dataclass(frozen=True)
class DstarServiceItem:
    label: str
    enabled: bool
    rx_hz: Frequency
    tx_hz: Frequency
    mode: str
    gateway_call_sign: Optional[str]
    reflector: Optional[str]
    note: str


@dataclass(frozen=True)
class C4fmServiceItem:
    label: str
    enabled: bool
    rx_hz: Frequency
    tx_hz: Frequency
    wires_x_node_id: Optional[int]
    room: Optional[str]
    note: str


@dataclass(frozen=True)
class AprsServiceItem:
    label: str
    enabled: bool
    rx_hz: Frequency
    tx_hz: Frequency
    mode: Optional[str]
    path: Optional[str]
    note: str


@dataclass(frozen=True)
class SsbServiceItem:
    label: str
    enabled: bool
    rx_hz: Frequency
    tx_hz: Frequency
    sideband: Optional[str]
    note: str


@dataclass(frozen=True)
class AmServiceItem:
    label: str
    enabled: bool
    rx_hz: Frequency
    tx_hz: Frequency
    note: str


@dataclass
class ServiceItems:
    """A repeater's services, split into one list per kind."""

    fm_services: list[FmServiceItem] = field(default_factory=list)
    dmr_services: list[DmrServiceItem] = field(default_factory=list)
    dstar_services: list[DstarServiceItem] = field(default_factory=list)
    c4fm_services: list[C4fmServiceItem] = field(default_factory=list)
    aprs_services: list[AprsServiceItem] = field(default_factory=list)
    ssb_services: list[SsbServiceItem] = field(default_factory=list)
    am_services: list[AmServiceItem] = field(default_factory=list)


@dataclass(kw_only=True)
class Repeater:
    """A repeater system with its contacts, location and services."""

    id: int
    call_sign: str
    status: str
    owner: Optional[Any] = None
    tech_contact: Optional[Any] = None
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    maidenhead: Optional[MaidenheadLocator] = None
    point: Optional[Point] = None
    elevation_m: Optional[int] = None
    country: Optional[str] = None
    region: Optional[str] = None
    services: ServiceItems = field(default_factory=ServiceItems)


def build_service_items(records: Iterable[ServiceRecord]) -> ServiceItems:
    """Group stored service records by kind, keeping their order and raw notes."""
    items = ServiceItems()
    for record in records:
        enabled = record.enabled
        note = record.note
        service = from_record(record)
        common = dict(
            label=service.label,
            enabled=enabled,
            rx_hz=service.rx_hz,
            tx_hz=service.tx_hz,
            note=note,
        )
        match service:
            case FmService():
                items.fm_services.append(
                    FmServiceItem(
                        **common,
                        bandwidth=service.bandwidth,
                        rx_tone=service.rx_tone,
                        tx_tone=service.tx_tone,
                    )
                )
            case DmrService():
                items.dmr_services.append(
                    DmrServiceItem(
                        **common,
                        color_code=service.color_code,
                        dmr_repeater_id=service.dmr_repeater_id,
                        network=service.network,
                    )
                )
            case DstarService():
                items.dstar_services.append(
                    DstarServiceItem(
                        **common,
                        mode=service.mode,
                        gateway_call_sign=service.gateway_call_sign,
                        reflector=service.reflector,
                    )
                )
            case C4fmService():
                items.c4fm_services.append(
                    C4fmServiceItem(
                        **common,
                        wires_x_node_id=service.wires_x_node_id,
                        room=service.room,
                    )
                )
            case AprsService():
                items.aprs_services.append(
                    AprsServiceItem(**common, mode=service.mode, path=service.path)
                )
            case SsbService():
                items.ssb_services.append(SsbServiceItem(**common, sideband=service.sideband))
            case AmService():
                items.am_services.append(AmServiceItem(**common))
    return items