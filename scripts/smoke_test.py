"""
Smoke test for the vendor registration endpoint.
Run: python scripts/smoke_test.py --base-url http://localhost:8000 (with the API running).

1. Posts a complete sample application and expects a success payload.
2. Posts an incomplete one and expects a 4xx validation response.
"""
import argparse
import json
import logging
import sys
import uuid

import httpx

logger = logging.getLogger("smoke_test")

ENDPOINT = "/api/vendor-onboarding/"

# Minimal valid PDF header, enough for the server's type check.
SAMPLE_PDF = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"


def sample_application() -> dict[str, str]:
    unique = uuid.uuid4().hex[:8]
    return {
        "name": "Abebe Kebede",
        "email": f"abebe.{unique}@example.com",
        "phone_number": "+251 912 345 678",
        "password": "s3cure-passw0rd",
        "password_confirmation": "s3cure-passw0rd",
        "business_name": "Kebede Electronics",
        "business_type": "retail",
        "business_description": "Consumer electronics and accessories retailer.",
        "business_email": f"shop.{unique}@example.com",
        "business_phone": "0911223344",
        "business_address": "Bole Road, Addis Ababa",
        "website": "https://kebede-electronics.example.com",
        "tin_number": "0012345678",
        "trade_license_number": "AA-TL-2024-001",
        "tax_id": "ET-TAX-99881",
    }


def check_valid_submission(client: httpx.Client) -> bool:
    logger.info("Testing vendor onboarding API...")
    files = {
        "trade_license_doc": ("trade_license.pdf", SAMPLE_PDF, "application/pdf"),
        "id_card_doc": ("id_card.pdf", SAMPLE_PDF, "application/pdf"),
    }
    resp = client.post(ENDPOINT, data=sample_application(), files=files)
    body = resp.json()

    ok = (
        200 <= resp.status_code < 300
        and body.get("success") is True
        and str(body.get("data", {}).get("application_id", "")).startswith("APP-")
    )
    if ok:
        logger.info("✅ API Test Successful!\n%s", json.dumps(body, indent=2))
    else:
        logger.error("❌ API Test Failed! status=%s\n%s", resp.status_code, json.dumps(body, indent=2))
    return ok


def check_validation(client: httpx.Client) -> bool:
    logger.info("Testing API validation with invalid data...")
    invalid = {
        "business_name": "",
        "business_email": "invalid-email",
    }
    resp = client.post(ENDPOINT, data=invalid)
    body = resp.json()

    if 400 <= resp.status_code < 500 and body.get("errors"):
        logger.info("✅ Validation Test Successful!\n%s", json.dumps(body["errors"], indent=2))
        return True
    logger.error(
        "❌ Validation test failed - expected a 4xx with errors, got %s\n%s",
        resp.status_code, json.dumps(body, indent=2),
    )
    return False


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--timeout", type=float, default=10.0)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        with httpx.Client(
            base_url=args.base_url,
            timeout=args.timeout,
            headers={"Accept": "application/json"},
        ) as client:
            results = [check_valid_submission(client), check_validation(client)]
    except httpx.HTTPError as e:
        logger.error("❌ Network Error: %s", e)
        return 1
    except ValueError as e:
        logger.error("❌ Response was not JSON: %s", e)
        return 1

    if all(results):
        logger.info("\n🎉 All tests completed!")
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())
