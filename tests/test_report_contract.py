from datetime import date

import pytest

import report_contract
from report_contract import (
    DEVICES,
    build_report_url,
    checkbox_selector,
    date_header_selector,
    format_range,
    is_known_defect,
    matches_report_filename,
    report_selector,
)


def test_format_range_matches_report_header():
    assert format_range("2024-10-28", "2024-10-30") == "Oct 28, 2024 - Oct 30, 2024"


def test_format_range_across_years_and_padding():
    assert format_range("2023-12-31", "2024-01-05") == "Dec 31, 2023 - Jan 05, 2024"


def test_format_range_accepts_dates():
    assert format_range(date(2024, 2, 29), date(2024, 3, 1)) == "Feb 29, 2024 - Mar 01, 2024"


def test_format_range_rejects_non_iso_input():
    with pytest.raises(ValueError):
        format_range("10/28/2024", "2024-10-30")


def test_build_report_url_without_filters_is_base_url():
    assert build_report_url("http://localhost:3000") == "http://localhost:3000"


def test_build_report_url_date_range():
    url = build_report_url("http://localhost:3000", start_date="2024-10-28", end_date="2024-10-30")
    assert url == "http://localhost:3000?startDate=2024-10-28&endDate=2024-10-30"


def test_build_report_url_keeps_device_commas_literal():
    url = build_report_url(
        "http://localhost:3000",
        start_date="2024-10-28",
        end_date="2024-10-30",
        devices=["MakerBot", "Prusa"],
    )
    assert url == "http://localhost:3000?startDate=2024-10-28&endDate=2024-10-30&devices=MakerBot,Prusa"


def test_build_report_url_appends_to_existing_query():
    url = build_report_url("http://localhost:3000/?theme=dark", devices=["Ender"])
    assert url == "http://localhost:3000/?theme=dark&devices=Ender"


def test_build_report_url_rejects_unknown_device():
    with pytest.raises(ValueError, match="Bambu"):
        build_report_url("http://localhost:3000", devices=["Bambu"])


def test_selectors_per_device():
    assert checkbox_selector("Ender") == "#checkbox-Ender"
    assert report_selector("Prusa") == "#report-Prusa"
    assert date_header_selector("MakerBot") == "#date-header-MakerBot"


@pytest.mark.parametrize("selector", [checkbox_selector, report_selector, date_header_selector])
def test_selectors_reject_devices_outside_universe(selector):
    with pytest.raises(ValueError):
        selector("makerbot")


def test_device_universe_is_closed_and_ordered():
    assert DEVICES == ("MakerBot", "Ender", "Prusa")


@pytest.mark.parametrize("filename", [
    "production-report-2024-10-28.pdf",
    "production-report-.pdf",
    "production-report-Oct 28, 2024 - Oct 30, 2024.pdf",
])
def test_report_filenames_match(filename):
    assert matches_report_filename(filename)


@pytest.mark.parametrize("filename", [
    "production-report-2024.pdf.part",
    "old-production-report-2024.pdf",
    "production-report-2024.PDF",
    "production_report_2024.pdf",
    "",
    None,
])
def test_unrelated_filenames_do_not_match(filename):
    assert not matches_report_filename(filename)


def test_makerbot_toggle_is_a_known_defect():
    assert is_known_defect("MakerBot", "device-toggle")
    assert not is_known_defect("MakerBot", "devices-from-url")
    assert not is_known_defect("Ender", "device-toggle")


def test_default_selection_is_unconfirmed():
    assert report_contract.EXPECTED_DEFAULT_DEVICES is None


def test_download_timeout_is_not_an_assertion_failure():
    assert not issubclass(report_contract.DownloadTimeoutError, AssertionError)
    assert report_contract.DOWNLOAD_TIMEOUT_MS == 20000
