"""Export FM repeater services as a CHIRP-compatible CSV channel list."""

from __future__ import annotations

import csv
import itertools
from dataclasses import astuple, dataclass
from typing import IO, Iterable, Iterator, Optional

from .items import FmServiceItem, Repeater
from .services import FmBandwidth, Frequency, Tone, ToneKind

CONTENT_TYPE = "text/csv; charset=utf-8"
CONTENT_DISPOSITION = 'attachment; filename="repeater-atlas-chirp.csv"'

CHIRP_HEADERS = (
    "Location",
    "Name",
    "Frequency",
    "Duplex",
    "Offset",
    "Tone",
    "rToneFreq",
    "cToneFreq",
    "DtcsCode",
    "DtcsPolarity",
    "RxDtcsCode",
    "CrossMode",
    "Mode",
    "TStep",
    "Skip",
    "Power",
    "Comment",
    "URCALL",
    "RPT1CALL",
    "RPT2CALL",
    "DVCODE",
)

DEFAULT_TONE_FREQ = "88.5"
DEFAULT_DTCS_CODE = "023"
DEFAULT_CROSS_MODE = "Tone->Tone"
DTCS_POLARITY = "NN"


@dataclass(frozen=True)
class ExportOptions:
    """Export settings; by default the receive tone is exported too."""

    export_rx_tone: bool = True


@dataclass(frozen=True)
class ChirpRow:
    """One CHIRP memory channel, fields in CSV column order."""

    location: int
    name: str
    frequency: str
    duplex: str
    offset: str
    tone: str
    r_tone_freq: str
    c_tone_freq: str
    dtcs_code: str
    dtcs_polarity: str
    rx_dtcs_code: str
    cross_mode: str
    mode: str
    t_step: str
    skip: str
    power: str
    comment: str
    urcall: str
    rpt1call: str
    rpt2call: str
    dvcode: str


def frequency_fields(tx_hz: Frequency, rx_hz: Frequency) -> tuple[Frequency, str, int]:
    """Return (radio transmit frequency, duplex sign, offset in Hz).

    The radio transmits on the repeater's receive frequency; the offset
    reaches the repeater's transmit frequency from there.
    """
    offset_hz = tx_hz.hz - rx_hz.hz
    if offset_hz == 0:
        return rx_hz, "", 0
    if offset_hz > 0:
        return rx_hz, "+", offset_hz
    return rx_hz, "-", -offset_hz


def _format_ctcss(hz: float) -> str:
    return f"{hz:.1f}"


def _format_dtcs(code: int) -> str:
    return f"{code:03d}"


def tone_fields(
    service: FmServiceItem, options: ExportOptions
) -> tuple[str, str, str, str, str, str, str]:
    """Return (tone, cross_mode, r_tone_freq, c_tone_freq, dtcs_code, rx_dtcs_code, polarity)."""
    tx = service.tx_tone
    rx = service.rx_tone if options.export_rx_tone else Tone.none()

    tone_freq, ctone_freq = DEFAULT_TONE_FREQ, DEFAULT_TONE_FREQ
    dtcs_code, rx_dtcs_code = DEFAULT_DTCS_CODE, DEFAULT_DTCS_CODE

    match (tx.kind, rx.kind):
        case (ToneKind.NONE, ToneKind.NONE):
            tone, cross = "", DEFAULT_CROSS_MODE
        case (ToneKind.CTCSS, ToneKind.NONE):
            tone, cross = "Tone", DEFAULT_CROSS_MODE
            tone_freq = _format_ctcss(tx.value)
        case (ToneKind.NONE, ToneKind.CTCSS):
            tone, cross = "TSQL", DEFAULT_CROSS_MODE
            ctone_freq = _format_ctcss(rx.value)
        case (ToneKind.CTCSS, ToneKind.CTCSS) if tx.value == rx.value:
            tone, cross = "TSQL", DEFAULT_CROSS_MODE
            tone_freq, ctone_freq = _format_ctcss(tx.value), _format_ctcss(rx.value)
        case (ToneKind.CTCSS, ToneKind.CTCSS):
            tone, cross = "Cross", "Tone->Tone"
            tone_freq, ctone_freq = _format_ctcss(tx.value), _format_ctcss(rx.value)
        case (ToneKind.DCS, ToneKind.NONE):
            tone, cross = "Cross", "DTCS->"
            dtcs_code = _format_dtcs(tx.value)
        case (ToneKind.NONE, ToneKind.DCS):
            tone, cross = "Cross", "->DTCS"
            rx_dtcs_code = _format_dtcs(rx.value)
        case (ToneKind.DCS, ToneKind.DCS) if tx.value == rx.value:
            tone, cross = "DTCS", DEFAULT_CROSS_MODE
            dtcs_code = _format_dtcs(tx.value)
        case (ToneKind.DCS, ToneKind.DCS):
            tone, cross = "Cross", "DTCS->DTCS"
            dtcs_code, rx_dtcs_code = _format_dtcs(tx.value), _format_dtcs(rx.value)
        case (ToneKind.CTCSS, ToneKind.DCS):
            tone, cross = "Cross", "Tone->DTCS"
            tone_freq = _format_ctcss(tx.value)
            rx_dtcs_code = _format_dtcs(rx.value)
        case (ToneKind.DCS, ToneKind.CTCSS):
            tone, cross = "Cross", "DTCS->Tone"
            ctone_freq = _format_ctcss(rx.value)
            dtcs_code = _format_dtcs(tx.value)
        case _:
            raise ValueError(f"unsupported tone combination: {tx!r}, {rx!r}")

    return tone, cross, tone_freq, ctone_freq, dtcs_code, rx_dtcs_code, DTCS_POLARITY


def build_fm_row(
    location: int, call_sign: str, service: FmServiceItem, options: ExportOptions
) -> ChirpRow:
    """Build the CHIRP channel for one FM service of a repeater."""
    frequency, duplex, offset_hz = frequency_fields(service.tx_hz, service.rx_hz)
    tone, cross_mode, r_tone, c_tone, dtcs, rx_dtcs, polarity = tone_fields(service, options)
    return ChirpRow(
        location=location,
        name=f"{call_sign} {service.label}".strip(),
        frequency=frequency.to_mhz_string(),
        duplex=duplex,
        offset=Frequency(offset_hz).to_mhz_string(),
        tone=tone,
        r_tone_freq=r_tone,
        c_tone_freq=c_tone,
        dtcs_code=dtcs,
        dtcs_polarity=polarity,
        rx_dtcs_code=rx_dtcs,
        cross_mode=cross_mode,
        mode="NFM" if service.bandwidth is FmBandwidth.NARROW else "FM",
        t_step="5.00",
        skip="",
        power="50W",
        comment=service.note,
        urcall="",
        rpt1call="",
        rpt2call="",
        dvcode="",
    )


def chirp_rows(
    repeaters: Iterable[Repeater], options: Optional[ExportOptions] = None
) -> Iterator[ChirpRow]:
    """Yield one channel per FM service, numbering locations from zero."""
    options = options or ExportOptions()
    locations = itertools.count()
    for repeater in repeaters:
        for service in repeater.services.fm_services:
            yield build_fm_row(next(locations), repeater.call_sign, service, options)


def write_chirp_csv(
    repeaters: Iterable[Repeater], options: Optional[ExportOptions], stream: IO[str]
) -> None:
    """Write the CHIRP CSV to ``stream``; nothing is written when there are no channels."""
    writer = csv.writer(stream, lineterminator="\n")
    header_written = False
    for row in chirp_rows(repeaters, options):
        if not header_written:
            writer.writerow(CHIRP_HEADERS)
            header_written = True
        writer.writerow(astuple(row))