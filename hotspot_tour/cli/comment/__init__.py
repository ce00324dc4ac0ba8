from gettext import gettext as _

COMMAND_DESCRIPTION = _("Change the comment of a hotspot")


def command(subparser):
    subparser.add_argument("image_id")
    subparser.add_argument("hotspot_id")
    subparser.add_argument("text", help=_("New comment, empty to clear it"))

    def handle(args):
        from hotspot_tour.cli.common import open_session, require_image

        session = open_session(args)
        require_image(session, args.image_id)
        updated = session.update_comment(args.hotspot_id, args.text, image_id=args.image_id)
        assert updated, _("No hotspot with id {hotspot_id}").format(hotspot_id=args.hotspot_id)

    return handle
