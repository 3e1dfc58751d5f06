class NotFoundError(Exception):
    """Запись не найдена (или относится к удаленному событию)."""


class SlotFullError(Exception):
    """На слоте не осталось свободных мест."""

    def __init__(self, slot_name: str):
        super().__init__(f"Slot '{slot_name}' is full")
        self.slot_name = slot_name
