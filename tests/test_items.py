import pytest

from repeateratlas.items import (
    FmServiceItem,
    Repeater,
    ServiceItems,
    build_service_items,
)
from repeateratlas.services import (
    FmBandwidth,
    Frequency,
    MissingFieldError,
    ServiceKind,
    ServiceRecord,
    Tone,
    ToneKind,
)

TX = Frequency(145_775_000)
RX = TX.offset(-600_000)


def record(kind, **extra):
    base = dict(repeater_id=1, kind=kind, label="VHF", rx_hz=RX, tx_hz=TX)
    base.update(extra)
    return ServiceRecord(**base)


def test_fm_record_becomes_fm_item():
    items = build_service_items(
        [
            record(
                ServiceKind.FM,
                fm_bandwidth=FmBandwidth.NARROW,
                rx_tone_kind=ToneKind.CTCSS,
                rx_ctcss_hz=88.5,
                tx_tone_kind=ToneKind.NONE,
            )
        ]
    )
    assert items.fm_services == [
        FmServiceItem(
            label="VHF",
            enabled=True,
            rx_hz=RX,
            tx_hz=TX,
            bandwidth=FmBandwidth.NARROW,
            rx_tone=Tone.ctcss(88.5),
            tx_tone=Tone.none(),
            note="",
        )
    ]
    assert items.dmr_services == []


def test_each_kind_lands_in_its_own_list():
    records = [
        record(ServiceKind.FM, fm_bandwidth=FmBandwidth.WIDE),
        record(ServiceKind.AM),
        record(ServiceKind.SSB, ssb_sideband="usb"),
        record(ServiceKind.DSTAR, dstar_mode="dv"),
        record(ServiceKind.DMR, dmr_color_code=1, dmr_network="BrandMeister"),
        record(ServiceKind.C4FM, c4fm_room="room"),
        record(ServiceKind.APRS, aprs_path="WIDE1-1"),
    ]
    items = build_service_items(records)
    lists = [
        items.fm_services,
        items.am_services,
        items.ssb_services,
        items.dstar_services,
        items.dmr_services,
        items.c4fm_services,
        items.aprs_services,
    ]
    assert [len(group) for group in lists] == [1] * 7
    assert items.ssb_services[0].sideband == "usb"
    assert items.dstar_services[0].mode == "dv"
    assert items.dmr_services[0].network == "BrandMeister"
    assert items.dmr_services[0].color_code == 1
    assert items.c4fm_services[0].room == "room"
    assert items.aprs_services[0].path == "WIDE1-1"


def test_enabled_and_note_are_kept():
    items = build_service_items([record(ServiceKind.AM, enabled=False, note="club net")])
    item = items.am_services[0]
    assert item.enabled is False
    assert item.note == "club net"


def test_order_is_preserved():
    items = build_service_items(
        [
            record(ServiceKind.FM, label="first", fm_bandwidth=FmBandwidth.NARROW),
            record(ServiceKind.FM, label="second", fm_bandwidth=FmBandwidth.WIDE),
        ]
    )
    assert [item.label for item in items.fm_services] == ["first", "second"]


def test_missing_required_field_raises():
    with pytest.raises(MissingFieldError):
        build_service_items([record(ServiceKind.DMR, dmr_network="net")])


def test_empty_input_gives_empty_items():
    assert build_service_items([]) == ServiceItems()


def test_repeater_defaults_to_no_services():
    repeater = Repeater(id=7, call_sign="LA1ABC", status="active")
    assert repeater.services == ServiceItems()
    assert repeater.point is None