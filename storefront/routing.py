# storefront/routing.py
"""Fragment routing.

The browser keeps the logical path in the URL fragment (``/#/product/2``).
A :class:`RouteTable` holds an ordered list of segment patterns; the first
pattern that matches the whole path wins. Patterns are made of literal
segments and named parameters, e.g. ``/product/:id<int>``.
"""
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar, Union

logger = logging.getLogger(__name__)

V = TypeVar("V")

ROOT_PATH = "/"


def _to_int(raw: str) -> int:
    # plain ASCII digits only: no sign, no underscores
    if not (raw.isascii() and raw.isdigit()):
        raise ValueError(f"not a number: {raw!r}")
    return int(raw)


_CONVERTERS: Dict[str, Callable[[str], Any]] = {
    "str": str,
    "int": _to_int,
}


def path_from_fragment(fragment: Optional[str]) -> str:
    """``'#/shop'`` -> ``'/shop'``; an empty fragment is the root path."""
    if not fragment:
        return ROOT_PATH
    path = fragment[1:] if fragment.startswith("#") else fragment
    path = path.split("?", 1)[0]
    if not path:
        return ROOT_PATH
    if not path.startswith("/"):
        path = "/" + path
    return path


def split_path(path: str) -> List[str]:
    return [segment for segment in path.strip("/").split("/") if segment]


class _Segment:
    __slots__ = ("literal", "name", "convert")

    def __init__(self, literal: Optional[str] = None, name: Optional[str] = None, convert=None):
        self.literal = literal
        self.name = name
        self.convert = convert

    @classmethod
    def parse(cls, raw: str) -> "_Segment":
        if not raw.startswith(":"):
            return cls(literal=raw)
        spec = raw[1:]
        type_name = "str"
        if spec.endswith(">") and "<" in spec:
            spec, type_name = spec[:-1].split("<", 1)
        if not spec:
            raise ValueError(f"route parameter without a name: {raw!r}")
        if type_name not in _CONVERTERS:
            raise ValueError(f"unknown route parameter type {type_name!r} in {raw!r}")
        return cls(name=spec, convert=_CONVERTERS[type_name])


class Route(Generic[V]):
    def __init__(self, pattern: str, view: V, name: Optional[str] = None) -> None:
        self.pattern = pattern
        self.view = view
        self.name = name or pattern
        self._segments = [_Segment.parse(raw) for raw in split_path(pattern)]
        names = [s.name for s in self._segments if s.name]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate parameter name in route {pattern!r}")

    @property
    def is_exact(self) -> bool:
        return all(s.literal is not None for s in self._segments)

    def match(self, path: str) -> Optional[Dict[str, Any]]:
        """Return the extracted parameters, or ``None`` if ``path`` does not match."""
        parts = split_path(path)
        if len(parts) != len(self._segments):
            return None
        params: Dict[str, Any] = {}
        for segment, part in zip(self._segments, parts):
            if segment.literal is not None:
                if segment.literal != part:
                    return None
                continue
            try:
                params[segment.name] = segment.convert(part)
            except ValueError:
                return None
        return params

    def __repr__(self) -> str:
        return f"Route({self.pattern!r})"


class RouteMatch(Generic[V]):
    def __init__(self, route: Route[V], path: str, params: Dict[str, Any]) -> None:
        self.route = route
        self.path = path
        self.params = params

    @property
    def view(self) -> V:
        return self.route.view

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"RouteMatch({self.route.pattern!r}, path={self.path!r}, params={self.params!r})"


class NoMatch:
    """Result of matching a path that no route accepts."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.params: Dict[str, Any] = {}

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"NoMatch(path={self.path!r})"


MatchResult = Union[RouteMatch, NoMatch]


class RouteTable(Generic[V]):
    def __init__(self, routes: Optional[List[Tuple[str, V]]] = None) -> None:
        self._routes: List[Route[V]] = []
        for pattern, view in routes or []:
            self.add(pattern, view)

    def add(self, pattern: str, view: V, name: Optional[str] = None) -> Route[V]:
        route = Route(pattern, view, name=name)
        self._routes.append(route)
        return route

    @property
    def routes(self) -> Tuple[Route[V], ...]:
        return tuple(self._routes)

    def match(self, path: str) -> MatchResult:
        for route in self._routes:
            params = route.match(path)
            if params is not None:
                return RouteMatch(route, path, params)
        return NoMatch(path)


NavigationListener = Callable[[str, str], None]


class Navigator:
    """Holds the current logical path (RouteState) of one browser session.

    ``navigate`` is the hashchange analogue: it re-derives the path from a
    fragment and notifies subscribers with ``(previous, current)``.
    """

    def __init__(self, table: RouteTable, fragment: Optional[str] = None) -> None:
        self.table = table
        self.current_path = path_from_fragment(fragment)
        self._listeners: List[NavigationListener] = []

    def navigate(self, fragment: Optional[str]) -> MatchResult:
        previous = self.current_path
        self.current_path = path_from_fragment(fragment)
        logger.debug("navigate %s -> %s", previous, self.current_path)
        for listener in list(self._listeners):
            listener(previous, self.current_path)
        return self.resolve()

    def resolve(self) -> MatchResult:
        return self.table.match(self.current_path)

    def subscribe(self, listener: NavigationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
