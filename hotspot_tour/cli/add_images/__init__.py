import asyncio
import logging
from gettext import gettext as _
from pathlib import Path

logger = logging.getLogger(__name__)

COMMAND_DESCRIPTION = _("Upload images to annotate with hotspots")


def command(subparser):
    subparser.add_argument("files", type=Path, nargs="+", help=_("Image files"))

    def handle(args):
        from hotspot_tour.cli.common import open_session
        from hotspot_tour.interfaces.image_source import acquire_images, load_image_files

        session = open_session(args)
        files = load_image_files(args.files)
        images = asyncio.run(
            acquire_images(
                files,
                prefix=session.config.ids.image_prefix,
                id_factory=session.id_factory,
            )
        )
        added = session.add_images(images)
        for image in added:
            print(f"{image.id}\t{image.filename}")
        logger.info(
            _("Added {added} of {total} files").format(added=len(added), total=len(files))
        )

    return handle
