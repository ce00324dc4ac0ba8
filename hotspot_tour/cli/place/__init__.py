from gettext import gettext as _

COMMAND_DESCRIPTION = _("Place a hotspot on an image at a percentage position")


def command(subparser):
    subparser.add_argument("image_id")
    subparser.add_argument("x", type=float, help=_("Horizontal position in percent"))
    subparser.add_argument("y", type=float, help=_("Vertical position in percent"))
    subparser.add_argument("-c", "--comment", dest="comment", default="")

    def handle(args):
        from hotspot_tour.cli.common import open_session, require_image

        session = open_session(args)
        require_image(session, args.image_id)
        assert 0 <= args.x <= 100 and 0 <= args.y <= 100, _(
            "Positions must be within 0 and 100"
        )
        hotspot = session.add_hotspot_at(args.image_id, args.x, args.y, args.comment)
        assert hotspot is not None, _("Hotspot could not be placed")
        print(hotspot.id)

    return handle
