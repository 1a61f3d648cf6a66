# repeateratlas

Building blocks for a catalogue of amateur radio repeaters. It covers grid
locators and distances, address geocoding with a local cache, and typed
repeater service records. It also provides CHIRP CSV export, map and "nearby"
views, and the small helpers behind logbook and location forms.

## Modules

### `repeateratlas.geo`

- `Point(latitude, longitude)`: a frozen latitude/longitude pair.
- `MaidenheadLocator(value)`: a validated locator of 2 to 10 characters. The
  letter case is normalised, for example `jp53EK` becomes `JP53ek`.
  `center()` returns the `Point` in the middle of the square. Malformed input
  raises `InvalidLocatorError`, which is a `ValueError`.
- `latlon_to_grid(latitude, longitude, length=6)` encodes a position as a
  locator string. The length must be 2, 4, 6, 8 or 10. Coordinates must be
  finite and in range, or `InvalidLocatorError` is raised.
- `distance_km(a, b)` gives the haversine distance, using an Earth radius of
  6371 km.

```python
from repeateratlas.geo import MaidenheadLocator, latlon_to_grid

latlon_to_grid(63.4305, 10.3951, 6)       # "JP53ek"
MaidenheadLocator("JP53fi").center()      # Point near 63.354, 10.458
```

### `repeateratlas.geocoding`

- `Geocoder`: an abstract base with `geocode_one(query)`, which returns a
  `Point` or `None`.
- `NullGeocoder`: never finds anything.
- `NominatimGeocoder(base_url, user_agent, cache_path, session, min_interval)`:
  - Queries `<base_url>/search` with `format=jsonv2&limit=1` using `requests`.
  - Waits at least `min_interval` seconds between requests (default 1.0).
  - Keeps results in a CSV cache with the columns `query,latitude,longitude`,
    loaded at start-up. Each new hit is appended to it.
  - Blank queries return `None` without a request.
  - `NominatimGeocoder.from_env()` builds one from the environment, with the
    cache at `data/geocoder.csv`.
- `nominatim_enabled_from_env()` reads `NOMINATIM_ENABLED`.
- `nominatim_geocoder_from_env()` returns one shared `NominatimGeocoder` for
  the process. When geocoding is disabled it returns a `NullGeocoder`.

Environment variables:

| Variable               | Meaning                                                     | Default                 |
|------------------------|-------------------------------------------------------------|-------------------------|
| `NOMINATIM_ENABLED`    | `1/true/yes/on` or `0/false/no/off`; anything else disables | enabled                 |
| `NOMINATIM_BASE_URL`   | Base URL of the Nominatim instance                          | `http://localhost:8080` |
| `NOMINATIM_USER_AGENT` | User-Agent sent with each request                           | `Repeater Atlas`        |

The following raise `GeocodingError`:

- failed requests
- malformed responses
- unreadable or malformed cache files
- cache write errors

### `repeateratlas.enrich`

`enrich_location(geocoder, call_sign, address, maidenhead)` returns an
`EnrichedLocation` with `address`, `maidenhead` and `point`:

- The address is trimmed, and an empty address counts as none.
- A given `MaidenheadLocator` wins. Its centre becomes the point, and the
  geocoder is not called.
- Otherwise the address is geocoded and a six-character locator is derived
  from the result.
- With no locator and no geocoding result, every field is `None`.

### `repeateratlas.services`

- `Frequency(hz)`: a non-negative whole number of hertz.
  - `offset(delta_hz)` shifts the frequency.
  - `to_mhz_string()` gives a string such as `145.775000`.
- `ServiceKind`, `FmBandwidth` and `ToneKind`: the enums for service kind,
  FM bandwidth and tone kind.
- `Tone`: build with `Tone.none()`, `Tone.ctcss(hz)` or `Tone.dcs(code)`.
  - `to_parts()` splits a tone into its stored parts.
  - `Tone.from_parts(kind, ctcss_hz, dcs_code)` rebuilds it. A kind without
    its value becomes no tone.
- Typed services: `FmService`, `AmService`, `SsbService`, `DstarService`,
  `DmrService`, `C4fmService` and `AprsService`.
- `ServiceRecord`: the flat storage form of a service.
- `to_record(service, repeater_id)` produces an enabled record. A missing note
  becomes `""`.
- `from_record(record)` reverses it; an empty note becomes `None`. A record
  lacking a field its kind requires raises `MissingFieldError`.

```python
from repeateratlas.services import FmBandwidth, FmService, Frequency, Tone, to_record

tx = Frequency(145_775_000)
fm = FmService(label="VHF", rx_hz=tx.offset(-600_000), tx_hz=tx,
               bandwidth=FmBandwidth.NARROW, tx_tone=Tone.ctcss(123.0))
record = to_record(fm, repeater_id=1)
```

### `repeateratlas.items`

- `build_service_items(records)` sorts service records into a `ServiceItems`.
  - It has one list per kind: `fm_services`, `dmr_services`,
    `dstar_services`, `c4fm_services`, `aprs_services`, `ssb_services` and
    `am_services`.
  - Each entry keeps the record's `enabled` flag and its raw note.
- `Repeater` is a repeater system with its:
  - contacts
  - location
  - status
  - `ServiceItems`

### `repeateratlas.chirp`

- `write_chirp_csv(repeaters, options, stream)` writes every FM service as a
  CHIRP memory row, starting with the header row. Nothing is written when
  there are no FM services.
- `chirp_rows(repeaters, options)` yields the same rows as `ChirpRow` objects,
  with locations numbered from 0.
- `frequency_fields`, `tone_fields` and `build_fm_row` fill in the columns:
  - **Frequency**: the repeater's input frequency.
  - **Duplex** and **Offset**: taken from the difference between the
    repeater's output and input.
  - **Tone fields**: the tone, cross-mode, CTCSS and DTCS fields.
  - **Mode**: `NFM` or `FM`, by bandwidth.
- `ExportOptions(export_rx_tone=True)` controls whether receive tones are
  exported.
- `CONTENT_TYPE` and `CONTENT_DISPOSITION` hold suitable download headers.

### `repeateratlas.mapview`

Pure functions that shape data for maps. They take `RepeaterSite` and
`LinkEdge` values and return `MapRepeater`, `MapLink`, `MapContext`,
`OrganizationMapContext` and `NearbyRepeaterItem` values.

- `home_map_repeaters(sites, kinds)` returns markers for every positioned
  repeater. Each marker carries its sorted, distinct service kinds.
- `nearby_repeaters(center, candidates, radius_meters=50000)` lists repeaters
  within the radius. The list is sorted by distance, then by call sign.
- `organization_map(club_sites, linked_sites, links)` maps club repeaters plus
  linked repeaters from outside the club, which are marked external. It
  returns `None` when there is nothing to show.
- `map_repeater_for_display`, `build_map_links` and `finalize_map_repeaters`
  are the building blocks of the above.

### `repeateratlas.forms`

Logbook helpers:

- `PageSize` and `parse_page_size`: `"a5"` selects A5, and anything else
  selects A4.
- `clamp_log_pages`: defaults to 10 and keeps the value between 1 and 100.
- `logbook_filename`.
- `LogbookLocation.from_parts`.

Search helpers:

- `normalize_search_prefix`.
- `CallSignKind` and `call_sign_kind_label`.
- `SEARCH_LIMIT`.

Location helpers:

- `parse_coord`: blank or malformed input gives `None`.
- `resolve_location(address, maidenhead, latitude, longitude, geocoder=None)`:
  - Explicit coordinates win and only gain a locator.
  - Otherwise the location is enriched through the given geocoder, or through
    the one from the environment.
  - An invalid locator raises `InvalidLocatorError`.

`AuthHeader.anonymous()` and `AuthHeader.logged_in_as(call_sign)` describe
who is viewing a page.

## What it does not do

The package has no web server, pages or templates. It has no user accounts,
login or token handling, and no database storage of any kind. Repeaters,
services, links and user locations must be loaded and saved by the caller.
The package does not typeset logbooks or produce PDFs: it only prepares their
options. It installs no command-line program.

## Tests

The test suite uses pytest and responses. Install them with the `test` extra
and run `pytest`.