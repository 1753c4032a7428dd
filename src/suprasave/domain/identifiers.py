"""World-object identifiers derived from soft object paths."""
from __future__ import annotations

from dataclasses import dataclass

UNSET_INSTANCE_NAME = "None"


@dataclass(frozen=True, slots=True, order=True)
class WorldObjectId:
    """Normalized ``area:instance_name`` key shared with the marker catalog."""

    area: str
    instance_name: str

    def __str__(self) -> str:
        return f"{self.area}:{self.instance_name}"

    @property
    def is_unset(self) -> bool:
        """True for references that point at nothing."""
        return self.instance_name in (UNSET_INSTANCE_NAME, "")

    @classmethod
    def parse(cls, key: str) -> "WorldObjectId":
        """Build an id from its rendered ``area:instance_name`` form."""
        area, sep, instance_name = key.partition(":")
        if not sep:
            raise ValueError(f"Identifier '{key}' must have the form 'area:instanceName'.")
        return cls(area=area, instance_name=instance_name)


def normalize_path(path: str, *, capitalize_instance: bool = False) -> WorldObjectId:
    """Map a soft object path to its world-object id.

    ``/Game/FirstPersonBP/Maps/DLC2_Complete.DLC2_Complete:PersistentLevel.Coin442_41``
    becomes ``DLC2_Complete:Coin442_41``: the instance name follows the final
    ``.``, the area runs from the final ``/`` to the next ``.``.

    ``capitalize_instance`` upper-cases the first character of the instance
    name. Some saves store a handful of instance names in lower case while the
    catalog does not; only fields known to need it should pass True.
    """
    instance_name = path.rsplit(".", 1)[-1]
    area = path.rsplit("/", 1)[-1].split(".", 1)[0]
    if capitalize_instance and instance_name:
        instance_name = instance_name[0].upper() + instance_name[1:]
    return WorldObjectId(area=area, instance_name=instance_name)
