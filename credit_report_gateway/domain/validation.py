"""Structural gate applied to raw XML text before extraction"""

import re
from typing import List

ROOT_TAG = "INProfileResponse"

# Root start tag, with or without attributes
_ROOT_MARKER = re.compile(rf"<{ROOT_TAG}[\s>]")

REQUIRED_SECTIONS = ("CreditProfileHeader", "Current_Application", "CAIS_Account")

# Checked by the upload endpoint on top of the structural gate
UPLOAD_REQUIRED_ELEMENTS = (ROOT_TAG, "CAIS_Account")


def validate_xml_structure(xml_content: str) -> bool:
    """
    Cheap substring check deciding whether extraction is worth attempting.

    Passes when the root marker is present and at least one of the required
    sections is mentioned. It does not guarantee extraction will succeed.
    """
    if not xml_content or not _ROOT_MARKER.search(xml_content):
        return False
    return any(section in xml_content for section in REQUIRED_SECTIONS)


def looks_like_xml(content: str) -> bool:
    return "<?xml" in content or f"<{ROOT_TAG}>" in content


def missing_upload_elements(content: str) -> List[str]:
    return [element for element in UPLOAD_REQUIRED_ELEMENTS if element not in content]
