from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from tmmoptics.errors import InvalidParameter, StructuralMismatch

from .layer import Layer


@dataclass(frozen=True)
class ThinFilmStack:
    """Ordered, immutable sequence of layers.

    The first layer is the incident medium and the last is the substrate; both
    are semi-infinite, their thickness is ignored. Layers in between are
    ordered from the incident side to the substrate side.

    Parameters
    ----------
    layers : Sequence[Layer]
        At least two layers.

    Examples
    --------
    >>> stack = ThinFilmStack([air, Layer.optical(n_mgf2), glass])
    >>> stack.films
    (Layer(...),)
    >>> stack2 = stack.insert(1, Layer(n_tio2, 50.0))
    """

    layers: tuple[Layer, ...]

    def __post_init__(self):
        layers = tuple(self.layers)
        if len(layers) < 2:
            raise StructuralMismatch(
                "A stack needs at least an incident medium and a substrate, "
                + f"got {len(layers)} layer(s)"
            )
        for i, layer in enumerate(layers):
            if not isinstance(layer, Layer):
                raise TypeError(f"Item {i} of the stack is not a Layer")
        object.__setattr__(self, "layers", layers)

    @classmethod
    def build(cls, incident: Layer, films: Iterable[Layer], substrate: Layer):
        """Stack from its incident medium, films and substrate."""
        return cls((incident, *films, substrate))

    @property
    def incident(self) -> Layer:
        return self.layers[0]

    @property
    def substrate(self) -> Layer:
        return self.layers[-1]

    @property
    def films(self) -> tuple[Layer, ...]:
        """Finite layers between the incident medium and the substrate."""
        return self.layers[1:-1]

    def insert(self, position: int, layer: Layer) -> ThinFilmStack:
        """New stack with ``layer`` inserted before ``position``.

        Position 0 and positions past the substrate are not allowed, the
        ambient media stay at both ends.
        """
        if not 1 <= position <= len(self.layers) - 1:
            raise StructuralMismatch(
                f"Insert position must be in [1, {len(self.layers) - 1}], got {position}"
            )
        layers = list(self.layers)
        layers.insert(position, layer)
        return ThinFilmStack(layers)

    def __len__(self):
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    def __getitem__(self, item):
        return self.layers[item]

    def __repr__(self):
        parts = [layer.name or f"Layer({i})" for i, layer in enumerate(self.layers)]
        return f"ThinFilmStack({len(self.films)} films: " + " -> ".join(parts) + ")"


def repeat_cell(cell: Sequence[Layer], times: int) -> list[Layer]:
    """Expand a unit cell ``times`` times, e.g. for a Bragg mirror.

    >>> mirror = repeat_cell([high, low], 8)
    """
    if times < 0:
        raise InvalidParameter(f"times must be >= 0, got {times}")
    return list(cell) * times


def as_stack(layers: ThinFilmStack | Sequence[Layer]) -> ThinFilmStack:
    if isinstance(layers, ThinFilmStack):
        return layers
    return ThinFilmStack(layers)
