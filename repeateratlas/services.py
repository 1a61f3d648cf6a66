"""Radio services offered by a repeater and their flat storage records."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Optional, TypeVar, Union


@dataclass(frozen=True, order=True)
class Frequency:
    """A non-negative radio frequency in whole hertz."""

    hz: int

    def __post_init__(self) -> None:
        if isinstance(self.hz, bool) or not isinstance(self.hz, int):
            raise TypeError(f"frequency must be an integer number of hertz, got {self.hz!r}")
        if self.hz < 0:
            raise ValueError(f"frequency must be non-negative, got {self.hz} Hz")

    def offset(self, delta_hz: int) -> Frequency:
        """Return this frequency shifted by ``delta_hz``; the result must stay non-negative."""
        return Frequency(self.hz + delta_hz)

    def to_mhz_string(self) -> str:
        """Format as megahertz with six decimals, e.g. ``145.775000``."""
        megahertz, remainder = divmod(self.hz, 1_000_000)
        return f"{megahertz}.{remainder:06d}"

    def __str__(self) -> str:
        return f"{self.to_mhz_string()} MHz"


class ServiceKind(enum.Enum):
    """The kind of service a repeater offers."""

    FM = "fm"
    AM = "am"
    SSB = "ssb"
    DSTAR = "dstar"
    DMR = "dmr"
    C4FM = "c4fm"
    APRS = "aprs"


class FmBandwidth(enum.Enum):
    """Channel width of an analogue FM service."""

    NARROW = "narrow"
    WIDE = "wide"


class ToneKind(enum.Enum):
    """Kind of sub-audible access tone."""

    NONE = "none"
    CTCSS = "ctcss"
    DCS = "dcs"


def _format_hz(hz: float) -> str:
    value = float(hz)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Tone:
    """An access tone: none, a CTCSS frequency in Hz or a DCS code."""

    kind: ToneKind = ToneKind.NONE
    value: Union[float, int, None] = None

    @classmethod
    def none(cls) -> Tone:
        return cls(ToneKind.NONE, None)

    @classmethod
    def ctcss(cls, hz: float) -> Tone:
        return cls(ToneKind.CTCSS, float(hz))

    @classmethod
    def dcs(cls, code: int) -> Tone:
        return cls(ToneKind.DCS, int(code))

    def to_parts(self) -> tuple[ToneKind, Optional[float], Optional[int]]:
        """Split into (kind, ctcss_hz, dcs_code) as stored in a record."""
        if self.kind is ToneKind.CTCSS:
            return ToneKind.CTCSS, self.value, None
        if self.kind is ToneKind.DCS:
            return ToneKind.DCS, None, self.value
        return ToneKind.NONE, None, None

    @classmethod
    def from_parts(
        cls,
        kind: Optional[ToneKind],
        ctcss_hz: Optional[float],
        dcs_code: Optional[int],
    ) -> Tone:
        """Rebuild a tone from stored parts; a kind without its value means no tone."""
        if kind is ToneKind.CTCSS and ctcss_hz is not None:
            return cls.ctcss(ctcss_hz)
        if kind is ToneKind.DCS and dcs_code is not None:
            return cls.dcs(dcs_code)
        return cls.none()

    def __str__(self) -> str:
        if self.kind is ToneKind.CTCSS:
            return f"CTCSS {_format_hz(self.value)} Hz"
        if self.kind is ToneKind.DCS:
            return f"DCS {self.value}"
        return "None"


class MissingFieldError(ValueError):
    """Raised when a stored service record lacks a field its kind requires."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"repeater_service missing required field {field_name}")
        self.field_name = field_name


@dataclass(kw_only=True)
class ServiceRecord:
    """Flat storage form of a service, with columns for every kind."""

    repeater_id: int
    kind: ServiceKind
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    enabled: bool = True
    note: str = ""
    fm_bandwidth: Optional[FmBandwidth] = None
    rx_tone_kind: Optional[ToneKind] = None
    rx_ctcss_hz: Optional[float] = None
    rx_dcs_code: Optional[int] = None
    tx_tone_kind: Optional[ToneKind] = None
    tx_ctcss_hz: Optional[float] = None
    tx_dcs_code: Optional[int] = None
    dmr_color_code: Optional[int] = None
    dmr_repeater_id: Optional[int] = None
    dmr_network: Optional[str] = None
    dstar_mode: Optional[str] = None
    dstar_gateway_call_sign: Optional[str] = None
    dstar_reflector: Optional[str] = None
    c4fm_wires_x_node_id: Optional[int] = None
    c4fm_room: Optional[str] = None
    aprs_mode: Optional[str] = None
    aprs_path: Optional[str] = None
    ssb_sideband: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class FmService:
    kind: ClassVar[ServiceKind] = ServiceKind.FM
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    bandwidth: FmBandwidth
    rx_tone: Tone = Tone()
    tx_tone: Tone = Tone()
    note: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class AmService:
    kind: ClassVar[ServiceKind] = ServiceKind.AM
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    note: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class SsbService:
    kind: ClassVar[ServiceKind] = ServiceKind.SSB
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    sideband: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class DstarService:
    kind: ClassVar[ServiceKind] = ServiceKind.DSTAR
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    mode: str
    gateway_call_sign: Optional[str] = None
    reflector: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class DmrService:
    kind: ClassVar[ServiceKind] = ServiceKind.DMR
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    color_code: int
    network: str
    dmr_repeater_id: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class C4fmService:
    kind: ClassVar[ServiceKind] = ServiceKind.C4FM
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    wires_x_node_id: Optional[int] = None
    room: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class AprsService:
    kind: ClassVar[ServiceKind] = ServiceKind.APRS
    label: str
    rx_hz: Frequency
    tx_hz: Frequency
    mode: Optional[str] = None
    path: Optional[str] = None
    note: Optional[str] = None


RepeaterService = Union[
    FmService, AmService, SsbService, DstarService, DmrService, C4fmService, AprsService
]

_T = TypeVar("_T")


def _require(value: Optional[_T], field_name: str) -> _T:
    if value is None:
        raise MissingFieldError(field_name)
    return value


def to_record(service: RepeaterService, repeater_id: int) -> ServiceRecord:
    """Flatten a service into an enabled storage record for ``repeater_id``."""
    common = dict(
        repeater_id=repeater_id,
        kind=service.kind,
        enabled=True,
        label=service.label,
        rx_hz=service.rx_hz,
        tx_hz=service.tx_hz,
        note=service.note or "",
    )
    match service:
        case FmService():
            rx_kind, rx_ctcss, rx_dcs = service.rx_tone.to_parts()
            tx_kind, tx_ctcss, tx_dcs = service.tx_tone.to_parts()
            return ServiceRecord(
                **common,
                fm_bandwidth=service.bandwidth,
                rx_tone_kind=rx_kind,
                rx_ctcss_hz=rx_ctcss,
                rx_dcs_code=rx_dcs,
                tx_tone_kind=tx_kind,
                tx_ctcss_hz=tx_ctcss,
                tx_dcs_code=tx_dcs,
            )
        case AmService():
            return ServiceRecord(**common)
        case SsbService():
            return ServiceRecord(**common, ssb_sideband=service.sideband)
        case DstarService():
            return ServiceRecord(
                **common,
                dstar_mode=service.mode,
                dstar_gateway_call_sign=service.gateway_call_sign,
                dstar_reflector=service.reflector,
            )
        case DmrService():
            return ServiceRecord(
                **common,
                dmr_color_code=service.color_code,
                dmr_repeater_id=service.dmr_repeater_id,
                dmr_network=service.network,
            )
        case C4fmService():
            return ServiceRecord(
                **common,
                c4fm_wires_x_node_id=service.wires_x_node_id,
                c4fm_room=service.room,
            )
        case AprsService():
            return ServiceRecord(**common, aprs_mode=service.mode, aprs_path=service.path)
    raise TypeError(f"unknown service type: {type(service).__name__}")


def from_record(record: ServiceRecord) -> RepeaterService:
    """Rebuild a typed service from a storage record; an empty note becomes ``None``."""
    note = record.note or None
    base = dict(label=record.label, rx_hz=record.rx_hz, tx_hz=record.tx_hz, note=note)
    kind = record.kind
    if kind is ServiceKind.FM:
        return FmService(
            **base,
            bandwidth=_require(record.fm_bandwidth, "fm_bandwidth"),
            rx_tone=Tone.from_parts(record.rx_tone_kind, record.rx_ctcss_hz, record.rx_dcs_code),
            tx_tone=Tone.from_parts(record.tx_tone_kind, record.tx_ctcss_hz, record.tx_dcs_code),
        )
    if kind is ServiceKind.AM:
        return AmService(**base)
    if kind is ServiceKind.SSB:
        return SsbService(**base, sideband=record.ssb_sideband)
    if kind is ServiceKind.DSTAR:
        return DstarService(
            **base,
            mode=_require(record.dstar_mode, "dstar_mode"),
            gateway_call_sign=record.dstar_gateway_call_sign,
            reflector=record.dstar_reflector,
        )
    if kind is ServiceKind.DMR:
        return DmrService(
            **base,
            color_code=_require(record.dmr_color_code, "dmr_color_code"),
            dmr_repeater_id=record.dmr_repeater_id,
            network=_require(record.dmr_network, "dmr_network"),
        )
    if kind is ServiceKind.C4FM:
        return C4fmService(
            **base,
            wires_x_node_id=record.c4fm_wires_x_node_id,
            room=record.c4fm_room,
        )
    if kind is ServiceKind.APRS:
        return AprsService(**base, mode=record.aprs_mode, path=record.aprs_path)
    raise ValueError(f"unknown service kind: {kind!r}")