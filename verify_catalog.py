import sys
import logging
from pathlib import Path

from salvage_engine.resources import ReferenceDatabase
from salvage_framework.components import ClassKind
from salvage_framework.progression import AbilityCatalog


def check_catalog(catalog: AbilityCatalog) -> list[str]:
    """Find reference data problems the JSON schemas cannot express."""
    problems = []
    trees = {a.tree for a in catalog.list_abilities()}
    ability_names = {a.name for a in catalog.list_abilities()}

    for cls in catalog.list_classes():
        for tree in cls.core_trees:
            if tree not in trees:
                problems.append(f"{cls.name}: core tree '{tree}' has no abilities")
        if cls.specialization_tree and cls.specialization_tree not in trees:
            problems.append(
                f"{cls.name}: specialization tree '{cls.specialization_tree}' has no abilities"
            )
        for name in sorted(cls.legendary_ability_names - ability_names):
            problems.append(f"{cls.name}: legendary ability '{name}' is not in the catalog")
        if cls.kind is ClassKind.HYBRID:
            if cls.specialization_tree is None:
                problems.append(f"{cls.name}: hybrid class without a specialization tree")
            elif catalog.get_tree_requirement(cls.specialization_tree) is None:
                problems.append(f"{cls.name}: no tree requirement for '{cls.specialization_tree}'")
        if cls.kind is ClassKind.ADVANCED and catalog.get_class(cls.base_class_id) is None:
            problems.append(f"{cls.name}: unknown base class '{cls.base_class_id}'")

    for requirement in catalog.list_tree_requirements():
        for tree in sorted(requirement.required_trees - trees):
            problems.append(f"Requirement for '{requirement.tree}': unknown tree '{tree}'")

    return problems


def main(data_path: str = "data") -> int:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("CatalogVerification")

    db = ReferenceDatabase(Path(data_path))

    logger.info("Loading reference data...")
    db.load_all()
    catalog = AbilityCatalog.from_database(db)

    if not len(catalog):
        logger.error("VERIFICATION FAILED: no abilities loaded")
        return 1

    problems = check_catalog(catalog)
    for problem in problems:
        logger.error(problem)

    if problems:
        logger.error(f"VERIFICATION FAILED: {len(problems)} problem(s)")
        return 1

    logger.info("VERIFICATION SUCCESSFUL: All reference data loaded and consistent.")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
