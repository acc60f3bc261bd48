"""Fixed class registry (PASCAL VOC, 21 classes) mapping names <-> ids."""

from typing import Dict, Iterable, Tuple

from .errors import ClassIdOutOfRangeError, UnknownClassError

BACKGROUND = 'background'
BACKGROUND_ID = 0

VOC_CLASSES = (
    'background', 'airplane', 'bicycle', 'bird', 'boat',
    'bottle', 'bus', 'car', 'cat', 'chair', 'cow', 'dining table',
    'dog', 'horse', 'motorbike', 'person', 'potted plant', 'sheep',
    'sofa', 'train', 'tv',
)


class ClassRegistry:
    """Ordered class names; the position of a name is its id."""

    def __init__(self, names: Iterable[str]):
        names = tuple(names)
        if not names:
            raise ValueError('Class registry needs at least one name')
        if any(not n for n in names):
            raise ValueError('Class names must be non-empty strings')
        if len(set(names)) != len(names):
            raise ValueError(f'Duplicate class names in registry: {names}')
        if names[BACKGROUND_ID] != BACKGROUND:
            raise ValueError(f"Class id {BACKGROUND_ID} must be '{BACKGROUND}', got '{names[0]}'")
        self._names: Tuple[str, ...] = names
        self._ids: Dict[str, int] = {name: i for i, name in enumerate(names)}

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._ids

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def id_of(self, name: str) -> int:
        try:
            return self._ids[name]
        except KeyError:
            raise UnknownClassError(f"Unknown class '{name}'. Choose from {list(self._names)}") from None

    def name_of(self, class_id: int) -> str:
        if not 0 <= int(class_id) < len(self._names):
            raise ClassIdOutOfRangeError(
                f'Class id {class_id} out of range [0, {len(self._names) - 1}]'
            )
        return self._names[int(class_id)]


VOC_REGISTRY = ClassRegistry(VOC_CLASSES)
