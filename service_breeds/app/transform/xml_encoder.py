"""
XML rendering of decoded catalog payloads.
"""

import re
import xml.etree.ElementTree as ET
from typing import Any, Optional

from service_breeds.app.domain.models import Collection, ImagePayload

XML_DECLARATION = '<?xml version="1.0"?>\n'

_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")

# Element name used for each entry of a list message, by route type tag
_ITEM_TAGS = {
    "imageSingle": "url",
    "imageMulti": "url",
    "breedOneDimensional": "breed",
}


def payload_to_xml(payload: ImagePayload, type_tag: Optional[str] = None) -> str:
    root = ET.Element("root")
    ET.SubElement(root, "status").text = payload.status
    message = ET.SubElement(root, "message")

    if isinstance(payload.message, Collection):
        if type_tag == "breedTwoDimensional" and payload.message.is_mapping:
            _append_breed_tree(message, payload.message.items)
        else:
            _append_value(message, payload.message.items, _ITEM_TAGS.get(type_tag or "", "item"))
    else:
        _append_value(message, payload.message.value, "item")

    return XML_DECLARATION + ET.tostring(root, encoding="unicode")


def _append_breed_tree(parent: ET.Element, breeds: dict) -> None:
    for breed, sub_breeds in breeds.items():
        node = ET.SubElement(parent, "breed", name=str(breed))
        if not isinstance(sub_breeds, list):
            continue
        for sub_breed in sub_breeds:
            ET.SubElement(node, "subbreed").text = str(sub_breed)


def _append_value(parent: ET.Element, value: Any, item_tag: str) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            key = str(key)
            if _is_element_name(key):
                node = ET.SubElement(parent, key)
            else:
                node = ET.SubElement(parent, "item", key=key)
            _append_value(node, child, "item")
    elif isinstance(value, list):
        for child in value:
            # annotated images nest url and altText under one element
            tag = "image" if item_tag == "url" and isinstance(child, dict) else item_tag
            node = ET.SubElement(parent, tag)
            _append_value(node, child, "item")
    elif value is not None:
        parent.text = str(value)


def _is_element_name(name: str) -> bool:
    return bool(_XML_NAME.match(name)) and not name.lower().startswith("xml")
