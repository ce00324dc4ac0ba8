from gettext import gettext as _

from hotspot_tour.core.hotspots import HotspotSession
from hotspot_tour.core.hotspots.collection import find_image
from hotspot_tour.persistence import FileBlobStore, PersistenceGateway
from hotspot_tour.utils.config import load_config


def open_session(args) -> HotspotSession:
    """Build a session on the file store selected by ``--store`` and load it."""
    cfg = load_config()
    directory = args.store if args.store is not None else cfg.storage.directory
    gateway = PersistenceGateway(FileBlobStore(directory), key=cfg.storage.key)
    session = HotspotSession(gateway=gateway, config=cfg)
    session.load()
    return session


def require_image(session: HotspotSession, image_id: str):
    image = find_image(session.state.images, image_id)
    assert image is not None, _("No image with id {image_id}").format(image_id=image_id)
    return image
