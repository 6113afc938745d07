"""Edit screen — modal for changing an existing instance."""

from hopper.models import InstanceDef
from hopper.screens.add import AddScreen


class EditScreen(AddScreen):
    """AddScreen pre-filled with an existing instance.

    The name may be changed; it only has to be unique among the other
    instances.  Dismisses with the updated InstanceDef, or None on cancel.
    """

    def __init__(self, instance: InstanceDef, existing_names: set[str]) -> None:
        super().__init__(existing_names - {instance.name}, instance=instance)
        self.original_name = instance.name

    def title_text(self) -> str:
        return f"Edit  {self.original_name}"
