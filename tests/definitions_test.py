import pytest

from inspectalot.definitions import DefinitionSet
from inspectalot.definitions import ImageDefinition
from inspectalot.definitions import build_all_definitions
from inspectalot.definitions import build_definition
from inspectalot.errors import LoadError
from inspectalot.errors import NotFoundError
from inspectalot.errors import ValidationError


def write_image(images_dir, name, text):
    image_dir = images_dir / name
    image_dir.mkdir()
    (image_dir / "image.yml").write_text(text)


_external_image = """
inherits: "external:ubuntu:22.04"
"""

_local_image = """
inherits: "base"
stage: "desktop"
"""


def test_parse_external():
    definition = ImageDefinition.parse_from("base", {"inherits": "external:ubuntu"})
    assert definition == ImageDefinition(
        name="base", inherits="ubuntu", inherits_external=True
    )


def test_parse_local():
    definition = ImageDefinition.parse_from("desktop", {"inherits": "base"})
    assert definition.inherits == "base"
    assert not definition.inherits_external


@pytest.mark.parametrize(
    "yaml_dict",
    [
        None,
        ["inherits", "base"],
        {},
        {"inherits": ""},
        {"inherits": 3},
        {"inherits": "external:"},
    ],
)
def test_parse_invalid(yaml_dict):
    with pytest.raises(LoadError):
        ImageDefinition.parse_from("bad", yaml_dict)


def test_to_yaml_dict_keeps_external_prefix():
    definition = ImageDefinition.parse_from("base", {"inherits": "external:ubuntu"})
    assert definition.to_yaml_dict() == {"inherits": "external:ubuntu"}


def test_last_definition_wins():
    definitions = DefinitionSet.from_definitions(
        [
            ImageDefinition("a", "ubuntu", True),
            ImageDefinition("b", "a", False),
            ImageDefinition("a", "fedora", True),
        ]
    )
    assert len(definitions) == 2
    assert definitions["a"].inherits == "fedora"


def test_get_definition_missing():
    definitions = DefinitionSet.from_definitions([])
    with pytest.raises(NotFoundError):
        definitions.get_definition("missing")


def test_build_all_definitions(tmp_path):
    write_image(tmp_path, "base", _external_image)
    write_image(tmp_path, "desktop", _local_image)
    (tmp_path / "not_an_image").mkdir()
    (tmp_path / "README.md").write_text("hello")
    (tmp_path / ".git").mkdir()

    definitions = build_all_definitions(tmp_path)
    assert set(definitions) == {"base", "desktop"}
    assert definitions["base"] == ImageDefinition("base", "ubuntu:22.04", True)
    assert definitions["desktop"] == ImageDefinition("desktop", "base", False)


def test_build_all_definitions_missing_dir(tmp_path):
    with pytest.raises(LoadError):
        build_all_definitions(tmp_path / "nope")


def test_build_all_definitions_bad_yaml(tmp_path):
    write_image(tmp_path, "base", _external_image)
    write_image(tmp_path, "broken", "inherits: [unclosed\n")
    with pytest.raises(LoadError):
        build_all_definitions(tmp_path)


def test_build_all_definitions_requires_dir():
    with pytest.raises(ValidationError):
        build_all_definitions("")


def test_build_definition(tmp_path):
    write_image(tmp_path, "desktop", _local_image)
    assert build_definition("desktop", tmp_path).name == "desktop"


def test_build_definition_missing(tmp_path):
    with pytest.raises(NotFoundError):
        build_definition("desktop", tmp_path)


def test_build_definition_requires_name(tmp_path):
    with pytest.raises(ValidationError):
        build_definition("", tmp_path)


def test_build_all_definitions_not_utf8(tmp_path):
    (tmp_path / "base").mkdir()
    (tmp_path / "base" / "image.yml").write_bytes(b"inherits: \xff\xfe\x80bad\n")
    with pytest.raises(LoadError):
        build_all_definitions(tmp_path)


def test_build_definition_missing_dir(tmp_path):
    with pytest.raises(LoadError):
        build_definition("desktop", tmp_path / "nope")
