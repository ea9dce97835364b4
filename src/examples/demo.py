#!/usr/bin/env python
"""
demo.py – one-shot showcase of FlexObject.

1. Parses a partially-known JSON payload into a typed model.
2. Shows declared vs dynamic properties and their enumeration order.
3. Subscribes to change notifications.
4. Serializes the result back to JSON.
"""

import logging

from flexobject import FlexObject, TypeMismatchError

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# ────────────────────────────────── 1. Concrete model ──────────────────────────────────
class Story(FlexObject):
    title: str | None = None
    body: str | None = None

    _rating: int | None = None

    @property
    def rating(self) -> int | None:
        return self._rating

    @rating.setter
    def rating(self, value: int | None) -> None:
        self._rating = value
        self.notify_changed()


def main() -> None:
    payload = '{"title": "Draft", "tags": ["noir"], "rating": 3, "author": "anon"}'
    story = Story.model_validate_json(payload)

    print(f"\n→ properties: {story.get_properties()}")
    print(f"→ dynamic only: {dict(story.dynamic_properties)}")

    story.subscribe(lambda name: print(f"  changed: {name}"))
    story.title = "Final title"  # declared field, silent
    story.rating = 5  # declared property, notifies itself
    story["mood"] = "tense"  # dynamic, notifies
    story.remove("author")  # dynamic, notifies

    try:
        story.get_as("rating", str)
    except TypeMismatchError as exc:
        print(f"→ typed read refused: {exc}")

    print(f"\n{story.model_dump_json(indent=2)}\n")


if __name__ == "__main__":
    main()
