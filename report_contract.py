import os
import re
from datetime import date
from urllib.parse import urlencode

BASE_URL = os.environ.get("PRODUCTION_REPORT_URL", "http://localhost:3000")

DEVICES = ("MakerBot", "Ender", "Prusa")

DOWNLOAD_TIMEOUT_MS = 20000

PDF_FILENAME_PATTERN = re.compile(r"production-report-.*\.pdf")

# device -> scenario whose visibility check is exempt until the page is fixed
KNOWN_DEFECTS = {
    "MakerBot": "device-toggle",
}

# Not confirmed by the page owners yet. Set to a tuple of devices to enable
# the default selection scenario.
EXPECTED_DEFAULT_DEVICES = None

START_DATE_INPUT = "#startDateInput"
END_DATE_INPUT = "#endDateInput"
DOWNLOAD_BUTTON = 'button:has-text("Download PDF")'

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class DownloadTimeoutError(Exception):
    """The PDF download event never fired within DOWNLOAD_TIMEOUT_MS."""


def _as_date(value):
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def format_header_date(value):
    # Month names are fixed so the process locale can't change them
    d = _as_date(value)
    return f"{_MONTHS[d.month - 1]} {d.day:02d}, {d.year}"


def format_range(start_date, end_date):
    """'2024-10-28', '2024-10-30' -> 'Oct 28, 2024 - Oct 30, 2024'"""
    return f"{format_header_date(start_date)} - {format_header_date(end_date)}"


def build_report_url(base_url=BASE_URL, start_date=None, end_date=None, devices=None):
    params = []
    if start_date is not None:
        params.append(("startDate", str(start_date)))
    if end_date is not None:
        params.append(("endDate", str(end_date)))
    if devices is not None:
        for device in devices:
            _check_device(device)
        params.append(("devices", ",".join(devices)))

    if not params:
        return base_url
    separator = "&" if "?" in base_url else "?"
    # The page splits devices on a literal comma
    return base_url + separator + urlencode(params, safe=",")


def _check_device(device):
    if device not in DEVICES:
        raise ValueError(f"Unknown device '{device}', expected one of {', '.join(DEVICES)}")


def checkbox_selector(device):
    _check_device(device)
    return f"#checkbox-{device}"


def report_selector(device):
    _check_device(device)
    return f"#report-{device}"


def date_header_selector(device):
    _check_device(device)
    return f"#date-header-{device}"


def matches_report_filename(filename):
    return filename is not None and PDF_FILENAME_PATTERN.fullmatch(filename) is not None


def is_known_defect(device, scenario):
    return KNOWN_DEFECTS.get(device) == scenario
