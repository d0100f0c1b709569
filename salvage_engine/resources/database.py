"""
Reference Database.

Handles loading and validation of the static rules reference data
(abilities, classes, ability tree requirements).
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class ReferenceDatabase:
    """
    Central storage for static reference data.

    Expected layout under the data path:
        schemas/ability.schema.json
        schemas/class.schema.json
        schemas/tree_requirement.schema.json
        database/abilities/*.json
        database/classes/*.json
        database/tree_requirements/*.json

    Each data file holds either one object or a list of objects; every
    object needs an "id". Entries are kept in file/list order.
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        # Data stores
        self.abilities: dict[str, Any] = {}
        self.classes: dict[str, Any] = {}
        self.tree_requirements: dict[str, Any] = {}

        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load_all(self) -> None:
        """Load all data from disk."""
        self._load_schemas()

        self.abilities = self._load_category("abilities", "ability.schema.json")
        self.classes = self._load_category("classes", "class.schema.json")
        self.tree_requirements = self._load_category(
            "tree_requirements", "tree_requirement.schema.json"
        )

        self.logger.info(
            f"Loaded {len(self.abilities)} abilities, "
            f"{len(self.classes)} classes, "
            f"{len(self.tree_requirements)} tree requirements."
        )

    def _load_schemas(self) -> None:
        """Load JSON schemas."""
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in sorted(schema_dir.glob("*.schema.json")):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, folder: str, schema_name: str) -> dict[str, Any]:
        """Load all JSON files in a category folder."""
        category_dir = self._data_path / "database" / folder
        data_store: dict[str, Any] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        schema = self._schemas.get(schema_name)
        if not schema:
            self.logger.warning(f"No schema found for {folder} ({schema_name})")
            return data_store

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                try:
                    jsonschema.validate(instance=entry, schema=schema)
                except jsonschema.ValidationError as e:
                    self.logger.error(f"Validation error in {file_path}: {e.message}")
                    continue

                if entry['id'] in data_store:
                    self.logger.warning(
                        f"Duplicate {folder} id '{entry['id']}' in {file_path}, keeping first"
                    )
                    continue
                data_store[entry['id']] = entry

        return data_store

    def get_ability(self, ability_id: str) -> dict[str, Any] | None:
        return self.abilities.get(ability_id)

    def get_class(self, class_id: str) -> dict[str, Any] | None:
        return self.classes.get(class_id)

    def get_tree_requirement(self, requirement_id: str) -> dict[str, Any] | None:
        return self.tree_requirements.get(requirement_id)
