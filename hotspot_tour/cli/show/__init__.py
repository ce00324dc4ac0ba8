from gettext import gettext as _

COMMAND_DESCRIPTION = _("List images and their hotspots")


def command(subparser):
    subparser.add_argument(
        "image_id", nargs="?", default=None, help=_("Only show this image")
    )

    def handle(args):
        from hotspot_tour.cli.common import open_session, require_image

        session = open_session(args)
        if args.image_id is not None:
            images = [require_image(session, args.image_id)]
        else:
            images = session.state.images
        if not images:
            print(_("No images yet. Upload one to start placing hotspots."))
            return
        for image in images:
            print(
                _("{image_id}\t{filename}\t{count} hotspots").format(
                    image_id=image.id, filename=image.filename, count=len(image.hotspots)
                )
            )
            for hotspot in image.hotspots:
                print(f"  {hotspot.id}\t({hotspot.x:.2f}%, {hotspot.y:.2f}%)\t{hotspot.comment}")

    return handle
