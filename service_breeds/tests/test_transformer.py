"""
Tests for annotation, XML rendering and response header rules.
"""

import json
import xml.etree.ElementTree as ET

import pytest

from service_breeds.app.domain.models import ResponseOptions, UpstreamResult
from service_breeds.app.transform.formatting import (
    alt_text_for_url,
    breed_folder_from_url,
    nice_breed_alt_from_folder,
    nice_breed_name_from_folder,
)
from service_breeds.app.transform.transformer import ResponseTransformer, XML_MEDIA_TYPE

from conftest import HOUND_IMAGES, json_result, success

CACHE_HEADERS = {"cache-control": ("public, max-age=3600",)}


@pytest.fixture
def transformer():
    return ResponseTransformer()


class TestFormatting:

    def test_breed_folder_from_url(self):
        assert breed_folder_from_url(HOUND_IMAGES[0]) == "hound-afghan"
        assert breed_folder_from_url("no-path") == ""

    def test_nice_names(self):
        assert nice_breed_name_from_folder("hound-afghan") == "Afghan Hound"
        assert nice_breed_name_from_folder("pug") == "Pug"
        assert nice_breed_alt_from_folder("hound-afghan") == "Afghan Hound dog"
        assert nice_breed_alt_from_folder("") == "Dog"

    def test_alt_text_for_url(self):
        assert alt_text_for_url(HOUND_IMAGES[1]) == "Basset Hound dog"


class TestAnnotate:

    def test_single_image_becomes_url_and_alt_text(self, transformer):
        result = transformer.annotate(json_result(success(HOUND_IMAGES[0])))

        assert json.loads(result.body)["message"] == {
            "url": HOUND_IMAGES[0],
            "altText": "Afghan Hound dog",
        }

    def test_every_image_in_list_is_annotated_in_order(self, transformer):
        result = transformer.annotate(json_result(success(HOUND_IMAGES)))

        message = json.loads(result.body)["message"]
        assert [entry["url"] for entry in message] == HOUND_IMAGES
        assert [entry["altText"] for entry in message] == [
            "Afghan Hound dog",
            "Basset Hound dog",
            "Blood Hound dog",
        ]

    def test_mapping_keys_are_preserved(self, transformer):
        result = transformer.annotate(json_result(success({"first": HOUND_IMAGES[0]})))

        assert json.loads(result.body)["message"]["first"]["altText"] == "Afghan Hound dog"

    def test_error_payloads_are_left_alone(self, transformer):
        source = json_result({"status": "error", "message": "Breed not found", "code": 404}, status=404)

        assert transformer.annotate(source) == source

    def test_custom_alt_text_formatter(self):
        transformer = ResponseTransformer(alt_text=lambda url: "a dog")

        result = transformer.annotate(json_result(success([HOUND_IMAGES[0]])))

        assert json.loads(result.body)["message"][0]["altText"] == "a dog"


class TestRespond:

    def test_json_forwards_cache_control_and_cors(self, transformer):
        source = json_result(success(["hound"]), headers=CACHE_HEADERS)

        response = transformer.respond(source)

        assert response.status_code == 200
        assert response.media_type == "application/json"
        assert response.content == source.body
        assert response.headers == {
            "Access-Control-Allow-Origin": "*",
            "Cache-Control": "public, max-age=3600",
        }

    def test_json_without_upstream_cache_control(self, transformer):
        response = transformer.respond(json_result(success(["hound"])))

        assert "Cache-Control" not in response.headers
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_xml_drops_cache_control(self, transformer):
        source = json_result(success(HOUND_IMAGES), headers=CACHE_HEADERS)

        response = transformer.respond(source, ResponseOptions(xml=True, type_tag="imageMulti"))

        assert response.media_type == XML_MEDIA_TYPE
        assert "Cache-Control" not in response.headers
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        root = ET.fromstring(response.content)
        assert [node.text for node in root.find("message").findall("url")] == HOUND_IMAGES

    def test_status_code_passes_through(self, transformer):
        source = json_result({"status": "error", "message": "Breed not found"}, status=404)

        assert transformer.respond(source).status_code == 404
        assert transformer.respond(source, ResponseOptions(xml=True)).status_code == 404

    def test_annotation_applies_before_xml(self, transformer):
        source = json_result(success(HOUND_IMAGES[:2]))

        response = transformer.respond(
            source, ResponseOptions(annotate=True, xml=True, type_tag="imageMulti")
        )

        images = ET.fromstring(response.content).find("message").findall("image")
        assert len(images) == 2
        assert images[1].find("url").text == HOUND_IMAGES[1]
        assert images[1].find("altText").text == "Basset Hound dog"


class TestXml:

    def render(self, transformer, payload, type_tag=None):
        return ET.fromstring(transformer.to_xml(json_result(payload), type_tag))

    def test_declaration_and_status(self, transformer):
        document = transformer.to_xml(json_result(success("x")), "imageSingle")

        assert document.startswith('<?xml version="1.0"?>')
        assert ET.fromstring(document).find("status").text == "success"

    def test_single_image(self, transformer):
        root = self.render(transformer, success(HOUND_IMAGES[0]), "imageSingle")

        assert root.find("message").text == HOUND_IMAGES[0]

    def test_annotated_single_image(self, transformer):
        payload = success({"url": HOUND_IMAGES[0], "altText": "Afghan Hound dog"})

        message = self.render(transformer, payload, "imageSingle").find("message")

        assert message.find("url").text == HOUND_IMAGES[0]
        assert message.find("altText").text == "Afghan Hound dog"

    def test_breed_list(self, transformer):
        root = self.render(transformer, success(["hound", "pug"]), "breedOneDimensional")

        assert [node.text for node in root.find("message").findall("breed")] == ["hound", "pug"]

    def test_breed_tree(self, transformer):
        payload = success({"hound": ["afghan", "basset"], "pug": []})

        breeds = self.render(transformer, payload, "breedTwoDimensional").find("message").findall("breed")

        assert [breed.get("name") for breed in breeds] == ["hound", "pug"]
        assert [sub.text for sub in breeds[0].findall("subbreed")] == ["afghan", "basset"]
        assert breeds[1].findall("subbreed") == []

    def test_generic_mapping_uses_keys_and_items(self, transformer):
        payload = success({"name": "Hound", "1st": "x", "tags": ["a", "b"]})

        message = self.render(transformer, payload, "breedInfo").find("message")

        assert message.find("name").text == "Hound"
        assert message.find("item[@key='1st']").text == "x"
        assert [node.text for node in message.find("tags").findall("item")] == ["a", "b"]

    def test_undecodable_body_becomes_error_document(self, transformer):
        document = transformer.to_xml(UpstreamResult(status=502, body="Bad gateway"))

        root = ET.fromstring(document)
        assert root.find("status").text == "error"
        assert root.find("message").text == "Bad gateway"
