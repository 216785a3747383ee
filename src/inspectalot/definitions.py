import collections.abc
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Iterable, Iterator

import yaml

from .errors import LoadError
from .errors import NotFoundError
from .errors import ValidationError


DEFINITION_FILE = "image.yml"
EXTERNAL_PREFIX = "external:"


@dataclass(frozen=True)
class ImageDefinition:

    name: str
    inherits: str
    inherits_external: bool

    @classmethod
    def parse_from(cls, name, yaml_dict):
        """Given a parsed image.yml, returns an ImageDefinition instance
        if the yaml dictionary is a valid definition, else raises."""
        if not isinstance(yaml_dict, collections.abc.Mapping):
            raise LoadError(f"Image '{name}' must be a dictionary")
        if "inherits" not in yaml_dict:
            raise LoadError(f"Image '{name}' lacks 'inherits'")

        inherits = yaml_dict["inherits"]
        if not isinstance(inherits, str) or not inherits:
            raise LoadError(f"Image '{name}' 'inherits' must be a non-empty string")

        inherits_external = inherits.startswith(EXTERNAL_PREFIX)
        if inherits_external:
            inherits = inherits[len(EXTERNAL_PREFIX) :]
            if not inherits:
                raise LoadError(f"Image '{name}' inherits an unnamed external image")

        return cls(name=name, inherits=inherits, inherits_external=inherits_external)

    def to_yaml_dict(self):
        inherits = self.inherits
        if self.inherits_external:
            inherits = EXTERNAL_PREFIX + inherits
        return {"inherits": inherits}


class DefinitionSet(collections.abc.Mapping):
    """Read-only mapping of image name to ImageDefinition."""

    def __init__(self, definitions: dict[str, ImageDefinition]):
        self.__definitions = dict(definitions)

    @classmethod
    def from_definitions(cls, definitions: Iterable[ImageDefinition]):
        """Build a set from definitions; a repeated name replaces the earlier one."""
        by_name = {}
        for definition in definitions:
            by_name[definition.name] = definition
        return cls(by_name)

    def __getitem__(self, name) -> ImageDefinition:
        return self.__definitions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.__definitions)

    def __len__(self) -> int:
        return len(self.__definitions)

    def get_definition(self, name) -> ImageDefinition:
        if name not in self.__definitions:
            raise NotFoundError(f"Image {name} doesn't exist")
        return self.__definitions[name]

    def __str__(self):
        yaml_dict = {}
        for name, definition in self.__definitions.items():
            yaml_dict[name] = definition.to_yaml_dict()
        return yaml.dump(yaml_dict, width=float("inf"))


def _parse_definition_file(name, path: Path) -> ImageDefinition:
    try:
        with open(path, "rb") as fin:
            yaml_dict = yaml.safe_load(fin)
    except OSError as e:
        raise LoadError(f"Could not read {path}: {e.strerror}") from e
    except yaml.YAMLError as e:
        raise LoadError(f"Could not parse {path}: {e}") from e
    return ImageDefinition.parse_from(name, yaml_dict)


def _list_images_dir(images_dir) -> list[str]:
    if not images_dir:
        raise ValidationError("Images directory is required")
    try:
        return sorted(os.listdir(images_dir))
    except OSError as e:
        raise LoadError(f"Could not read images directory {images_dir}: {e.strerror}") from e


def build_definition(name, images_dir) -> ImageDefinition:
    if not name:
        raise ValidationError("Name is required")
    _list_images_dir(images_dir)

    path = Path(images_dir) / name / DEFINITION_FILE
    if not path.is_file():
        raise NotFoundError(f"Image {name} doesn't exist")
    return _parse_definition_file(name, path)


def build_all_definitions(images_dir) -> DefinitionSet:
    """Load every image definition found directly under images_dir."""
    definitions = []
    for entry in _list_images_dir(images_dir):
        if entry.startswith("."):
            continue
        path = Path(images_dir) / entry / DEFINITION_FILE
        if not path.is_file():
            continue
        definitions.append(_parse_definition_file(entry, path))
    return DefinitionSet.from_definitions(definitions)
