"""SceneGraph - the immutable catalog of known scenes.

Scenes keep their catalog order, which is the order used to resolve
simultaneously matching scenes. Routing is breadth-first over the
transition edges; routes are cached per (from, to) pair since the graph
never changes after construction.
"""

import threading
from collections import deque
from collections.abc import Iterable, Iterator

from ..model.scene import Scene, Transition
from ..state_exceptions import SceneNotFoundError


class SceneGraph:
    """Ordered, read-only collection of scenes with shortest-path routing."""

    def __init__(self, scenes: Iterable[Scene]) -> None:
        """Initialize the graph.

        Args:
            scenes: Scenes in catalog order

        Raises:
            ValueError: If two scenes share an id
        """
        ordered = tuple(scenes)
        index: dict[str, Scene] = {}
        for scene in ordered:
            if scene.id in index:
                raise ValueError(f"Duplicate scene id: {scene.id}")
            index[scene.id] = scene

        self._scenes = ordered
        self._index = index
        self._route_cache: dict[tuple[str, str], tuple[str, ...] | None] = {}
        self._cache_lock = threading.Lock()

    @property
    def scenes(self) -> tuple[Scene, ...]:
        return self._scenes

    def __iter__(self) -> Iterator[Scene]:
        return iter(self._scenes)

    def __len__(self) -> int:
        return len(self._scenes)

    def __contains__(self, scene_id: object) -> bool:
        return scene_id in self._index

    def get(self, scene_id: str) -> Scene:
        """Look up a scene by id.

        Args:
            scene_id: Scene id

        Returns:
            The scene

        Raises:
            SceneNotFoundError: If no scene has this id
        """
        try:
            return self._index[scene_id]
        except KeyError:
            raise SceneNotFoundError(scene_id) from None

    def route(self, from_id: str, to_id: str) -> tuple[str, ...] | None:
        """Find the shortest sequence of scene ids from ``from_id`` to ``to_id``.

        Transitions whose target is not in the graph are ignored.

        Args:
            from_id: Starting scene id
            to_id: Target scene id

        Returns:
            Scene ids including both ends, or None if unreachable
        """
        key = (from_id, to_id)
        with self._cache_lock:
            if key in self._route_cache:
                return self._route_cache[key]

        path = self._bfs(from_id, to_id)

        with self._cache_lock:
            self._route_cache[key] = path
        return path

    def _bfs(self, from_id: str, to_id: str) -> tuple[str, ...] | None:
        if from_id not in self._index or to_id not in self._index:
            return None
        if from_id == to_id:
            return (from_id,)

        parents: dict[str, str] = {}
        visited = {from_id}
        queue = deque([from_id])

        while queue:
            current = queue.popleft()
            for transition in self._index[current].transitions:
                nxt = transition.target
                if nxt in visited or nxt not in self._index:
                    continue
                parents[nxt] = current
                if nxt == to_id:
                    path = [nxt]
                    while path[-1] != from_id:
                        path.append(parents[path[-1]])
                    return tuple(reversed(path))
                visited.add(nxt)
                queue.append(nxt)

        return None

    def next_hop(self, from_id: str, to_id: str) -> Transition | None:
        """Choose the transition to take from ``from_id`` toward ``to_id``.

        A direct transition to the target wins; otherwise the first edge of
        the shortest route is used.

        Args:
            from_id: Current scene id
            to_id: Target scene id

        Returns:
            Transition to click, or None if the target is unreachable
        """
        scene = self._index.get(from_id)
        if scene is None or from_id == to_id:
            return None

        direct = scene.transition_to(to_id)
        if direct is not None:
            return direct

        path = self.route(from_id, to_id)
        if path is None or len(path) < 2:
            return None
        return scene.transition_to(path[1])
