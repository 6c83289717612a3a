"""Assembly of the wall reconciler and scene session."""
from shared.engine import ShapelyEngine
from shared.scene import Scene
from reconcile.patcher import ItemStore
from reconcile.reconciler import Reconciler
from reconcile.session import SceneSession
from walls.actor import WALL_KIND
from walls.doors import DoorReactor


def build_wall_reconciler(store: ItemStore, engine: ShapelyEngine | None = None) -> Reconciler:
    """Reconciler with the door reactor and the wall actor kind registered (in that order)."""
    engine = engine or ShapelyEngine()
    reconciler = Reconciler(store, engine)
    reconciler.register_reactor(DoorReactor(engine))
    reconciler.register_actor(WALL_KIND)
    return reconciler


def start_wall_sync(scene: Scene, engine: ShapelyEngine | None = None) -> SceneSession:
    session = SceneSession(scene, build_wall_reconciler(scene.items, engine))
    session.start()
    return session
