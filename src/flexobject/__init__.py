"""
Public surface for flexobject.
Declared pydantic fields and free-form extra properties behind one
get/set/remove/enumerate API, with per-instance change notification.
"""

import logging

from .core.descriptors import StaticDescriptor, StaticDescriptorTable
from .core.flex import FlexObject
from .errors import FlexError, NotifyWithoutNameError, TypeMismatchError
from .events import ChangeNotifier

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FlexObject",
    "ChangeNotifier",
    "StaticDescriptor",
    "StaticDescriptorTable",
    "FlexError",
    "TypeMismatchError",
    "NotifyWithoutNameError",
]
