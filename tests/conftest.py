"""Shared fixtures for SimpleBackup tests."""

import xml.etree.ElementTree as ET

import pytest

from simplebackup.store import CONTENT_TYPE, FOLDER_TYPE, PAGE_TYPE, MemoryTreeStore

SV = "{http://www.jcp.org/jcr/sv/1.0}"


def child_node_names(xml_bytes: bytes) -> list:
    """Names of the direct child nodes of an exported root node."""
    root = ET.fromstring(xml_bytes)
    return [child.get(SV + "name") for child in root.findall(SV + "node")]


def property_values(xml_bytes: bytes, name: str) -> list:
    """Values of a property on the exported root node."""
    root = ET.fromstring(xml_bytes)
    for prop in root.findall(SV + "property"):
        if prop.get(SV + "name") == name:
            return [value.text or "" for value in prop.findall(SV + "value")]
    return []


@pytest.fixture
def store():
    """Store with a flat 'website' workspace and a splittable 'dms' workspace."""
    tree_store = MemoryTreeStore()

    website = tree_store.add_workspace("website")
    home = website.add_node("home", PAGE_TYPE, title="Home")
    home.add_node("about", PAGE_TYPE, title="About us")

    dms = tree_store.add_workspace("dms")
    a = dms.add_node("a", FOLDER_TYPE)
    a.add_node("report.pdf", CONTENT_TYPE, size=1024)
    dms.add_node("notes", "nt:unstructured", text="kept in the root export")
    dms.add_node("b", PAGE_TYPE, title="B")
    dms.add_node("jcr:system", "rep:system")

    return tree_store
