"""Declarative output-shape descriptors.

A ``Shape`` describes the JSON a structured call asks the service for. The same
descriptor is rendered into the request (``to_schema``) and used to check the
decoded response (``validate``), so it stays plain data instead of mirroring
the pydantic records in ``models``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

STRING = "string"
STRING_LIST = "string_list"
INTEGER = "integer"
OBJECT = "object"
ARRAY = "array"

_SCHEMA_TYPES: Dict[str, str] = {
	STRING: "STRING",
	INTEGER: "INTEGER",
	OBJECT: "OBJECT",
	ARRAY: "ARRAY",
}


class ShapeMismatch(ValueError):
	def __init__(self, path: str, reason: str) -> None:
		super().__init__(f"{path or '<root>'}: {reason}")
		self.path = path
		self.reason = reason


@dataclass(frozen=True)
class Shape:
	kind: str
	properties: Dict[str, "Shape"] = field(default_factory=dict)
	required: FrozenSet[str] = frozenset()
	items: Optional["Shape"] = None

	def to_schema(self) -> Dict[str, Any]:
		"""Render as the service's ``responseSchema`` object."""
		if self.kind == STRING_LIST:
			return {"type": "ARRAY", "items": {"type": "STRING"}}
		schema: Dict[str, Any] = {"type": _SCHEMA_TYPES[self.kind]}
		if self.kind == OBJECT:
			schema["properties"] = {name: prop.to_schema() for name, prop in self.properties.items()}
			if self.required:
				# keep declaration order so the rendered request is stable
				schema["required"] = [name for name in self.properties if name in self.required]
		elif self.kind == ARRAY and self.items is not None:
			schema["items"] = self.items.to_schema()
		return schema

	def validate(self, value: Any, path: str = "") -> None:
		"""Raise ``ShapeMismatch`` on the first field that does not fit."""
		if self.kind == STRING:
			if not isinstance(value, str):
				raise ShapeMismatch(path, "expected a string")
		elif self.kind == INTEGER:
			if isinstance(value, bool) or not isinstance(value, int):
				raise ShapeMismatch(path, "expected an integer")
		elif self.kind == STRING_LIST:
			if not isinstance(value, list):
				raise ShapeMismatch(path, "expected a list of strings")
			for i, item in enumerate(value):
				if not isinstance(item, str):
					raise ShapeMismatch(f"{path}[{i}]", "expected a string")
		elif self.kind == ARRAY:
			if not isinstance(value, list):
				raise ShapeMismatch(path, "expected a list")
			if self.items is not None:
				for i, item in enumerate(value):
					self.items.validate(item, f"{path}[{i}]")
		elif self.kind == OBJECT:
			if not isinstance(value, dict):
				raise ShapeMismatch(path, "expected an object")
			for name in self.properties:
				child = f"{path}.{name}" if path else name
				if name not in value or value[name] is None:
					if name in self.required:
						raise ShapeMismatch(child, "required field is missing")
					continue
				self.properties[name].validate(value[name], child)
		else:
			raise ValueError(f"unknown shape kind: {self.kind}")


def obj(required: tuple = (), **properties: Shape) -> Shape:
	return Shape(OBJECT, properties=dict(properties), required=frozenset(required))


def array_of(items: Shape) -> Shape:
	return Shape(ARRAY, items=items)


string = Shape(STRING)
string_list = Shape(STRING_LIST)
integer = Shape(INTEGER)


SLIDES = array_of(obj(
	("title", "content"),
	title=string,
	content=string_list,
	speakerNotes=string,
))

FLASHCARDS = array_of(obj(
	("term", "definition"),
	term=string,
	definition=string,
))

QUIZ = array_of(obj(
	("question", "options", "correctAnswer"),
	question=string,
	options=string_list,
	correctAnswer=string,
))

STUDY_PLAN = obj(
	("topic", "durationDays", "dailyTasks"),
	topic=string,
	durationDays=integer,
	dailyTasks=array_of(obj(
		("day", "topics", "goals", "quiz"),
		day=integer,
		topics=string_list,
		goals=string_list,
		quiz=obj(("question", "answer"), question=string, answer=string),
	)),
)
