from gettext import gettext as _

COMMAND_DESCRIPTION = _("Delete an image, or one of its hotspots")


def command(subparser):
    subparser.add_argument("image_id")
    subparser.add_argument(
        "hotspot_id", nargs="?", default=None, help=_("Delete only this hotspot")
    )

    def handle(args):
        from hotspot_tour.cli.common import open_session, require_image

        session = open_session(args)
        require_image(session, args.image_id)
        if args.hotspot_id is None:
            session.delete_image(args.image_id)
            return
        removed = session.delete_hotspot(args.hotspot_id, image_id=args.image_id)
        assert removed, _("No hotspot with id {hotspot_id}").format(hotspot_id=args.hotspot_id)

    return handle
