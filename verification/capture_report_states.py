
from playwright.sync_api import sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
import os

from report_contract import (
    BASE_URL,
    DEVICES,
    END_DATE_INPUT,
    START_DATE_INPUT,
    build_report_url,
    checkbox_selector,
)

SCREENSHOT_DIR = "verification"

REPORT_STATES = [
    ("report_default", {}),
    ("report_date_range", {"start_date": "2024-10-28", "end_date": "2024-10-30"}),
    ("report_device_subset", {"start_date": "2024-10-28", "end_date": "2024-10-30",
                              "devices": ("MakerBot", "Prusa")}),
    ("report_all_devices", {"devices": DEVICES}),
]


def capture_state(page, url, name, screenshot_dir=SCREENSHOT_DIR):
    print(f"Capturing {name} at {url}...")
    page.goto(url)

    # Filters render before the report sections, wait for all of them
    try:
        for selector in (START_DATE_INPUT, END_DATE_INPUT) + tuple(checkbox_selector(d) for d in DEVICES):
            page.wait_for_selector(selector, state="attached", timeout=5000)
    except PlaywrightTimeoutError as e:
        print(f"{name}: Timeout waiting for report filters: {e}")
        raise

    path = os.path.join(screenshot_dir, f"{name}.png")
    page.screenshot(path=path, full_page=True)
    print(f"{name}: Screenshot saved")
    return path


def main():
    os.makedirs(SCREENSHOT_DIR, exist_ok=True)

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        try:
            for name, params in REPORT_STATES:
                context = browser.new_context()
                page = context.new_page()
                try:
                    capture_state(page, build_report_url(BASE_URL, **params), name, SCREENSHOT_DIR)
                finally:
                    context.close()
        finally:
            browser.close()

    print(f"Screenshots saved to {SCREENSHOT_DIR}/")


if __name__ == "__main__":
    main()
