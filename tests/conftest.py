"""Shared fixtures: a fully valid vendor application."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from vendor_bot.wizard.fields import Attachment

PDF_BYTES = b"%PDF-1.4\n%%EOF\n"


def make_valid_values() -> dict[str, str]:
    return {
        "name": "Abebe Kebede",
        "email": "abebe@example.com",
        "phone_number": "+251 912 345 678",
        "password": "s3cure-passw0rd",
        "password_confirmation": "s3cure-passw0rd",
        "business_name": "Kebede Electronics",
        "business_type": "retail",
        "business_description": "Consumer electronics and accessories.",
        "business_email": "shop@example.com",
        "business_phone": "0911223344",
        "business_address": "Bole Road, Addis Ababa",
        "website": "",
        "tin_number": "0012345678",
        "trade_license_number": "AA-TL-001",
        "tax_id": "ET-99881",
    }


def make_documents() -> dict[str, Attachment]:
    return {
        "trade_license_doc": Attachment("trade_license.pdf", PDF_BYTES, "application/pdf"),
        "id_card_doc": Attachment("id_card.jpg", b"\xff\xd8\xff\xe0fakejpeg", "image/jpeg"),
    }


@pytest.fixture
def valid_values():
    return make_valid_values()


@pytest.fixture
def documents():
    return make_documents()
