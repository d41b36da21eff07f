"""
Demo Catalog — Admin Demo Form

    CLOSED -> OPEN_FOR_CREATE -> SUBMITTING -> CLOSED
    CLOSED -> OPEN_FOR_EDIT   -> SUBMITTING -> CLOSED

A failed submit goes back to the open state it came from, keeping the
field values, the selected tags and the error message.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .catalog_ops import save_demo
from .models import DEMO_FIELDS, Demo


class FormMode(Enum):
    CLOSED = "closed"
    OPEN_FOR_CREATE = "open_for_create"
    OPEN_FOR_EDIT = "open_for_edit"
    SUBMITTING = "submitting"


OPEN_MODES = (FormMode.OPEN_FOR_CREATE, FormMode.OPEN_FOR_EDIT)


class InvalidTransition(RuntimeError):
    pass


def _empty_fields() -> Dict[str, str]:
    return {name: "" for name in DEMO_FIELDS}


def _no_errors() -> Dict[str, bool]:
    errors = {name: False for name in DEMO_FIELDS}
    errors["tags"] = False
    return errors


@dataclass
class DemoForm:
    mode: FormMode = FormMode.CLOSED
    editing_id: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=_empty_fields)
    selected_tags: List[str] = field(default_factory=list)
    errors: Dict[str, bool] = field(default_factory=_no_errors)
    diagnostic: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.mode in OPEN_MODES

    def open_for_create(self):
        self._require_not_submitting()
        self.reset()
        self.mode = FormMode.OPEN_FOR_CREATE

    def open_for_edit(self, demo: Demo, relationships: Iterable):
        """Pre-populate from a demo; tags come from the relationships that point at it."""
        self._require_not_submitting()
        self.reset()
        self.fields = demo.form_fields()
        self.selected_tags = [rel.tag_id for rel in relationships if rel.demo_id == demo.id and rel.tag_id]
        self.editing_id = demo.id
        self.mode = FormMode.OPEN_FOR_EDIT

    def set_field(self, name: str, value: str):
        if name not in self.fields:
            raise KeyError(name)
        self.fields[name] = value
        self.errors[name] = False

    def toggle_tag(self, tag_id: str):
        if tag_id in self.selected_tags:
            self.selected_tags.remove(tag_id)
        else:
            self.selected_tags.append(tag_id)
        if self.selected_tags:
            self.errors["tags"] = False

    def validate(self) -> bool:
        """Every field non-blank and at least one tag selected."""
        self.errors = {name: not (value or "").strip() for name, value in self.fields.items()}
        self.errors["tags"] = not self.selected_tags
        return not any(self.errors.values())

    def submit(self, backend) -> bool:
        """
        Validate and save. Returns True when the form closed after a save.
        """
        if not self.is_open:
            raise InvalidTransition(f"Cannot submit a form in state {self.mode.value}")
        if not self.validate():
            return False

        prior_mode = self.mode
        self.mode = FormMode.SUBMITTING
        _, error = save_demo(backend, self.fields, list(self.selected_tags), self.editing_id)
        if error:
            self.mode = prior_mode
            self.diagnostic = error
            return False

        self.reset()
        return True

    def close(self):
        self._require_not_submitting()
        self.reset()

    def reset(self):
        self.mode = FormMode.CLOSED
        self.editing_id = None
        self.fields = _empty_fields()
        self.selected_tags = []
        self.errors = _no_errors()
        self.diagnostic = None

    def _require_not_submitting(self):
        if self.mode == FormMode.SUBMITTING:
            raise InvalidTransition("Form is submitting")
