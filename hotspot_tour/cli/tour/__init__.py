import sys
from gettext import gettext as _

COMMAND_DESCRIPTION = _("Walk through the hotspots of an image")

COMMANDS = {
    "n": "next_step",
    "next": "next_step",
    "": "next_step",
    "p": "prev_step",
    "prev": "prev_step",
    "q": "exit_tour",
    "quit": "exit_tour",
}


def print_step(step, out=print):
    hotspot = step.hotspot
    out(f"{step.label}\t({hotspot.x:.2f}%, {hotspot.y:.2f}%)")
    out(f"  {step.description}")


def run_tour(session, image_id, lines, out=print):
    """
    Drive a tour from text commands.

    Args:
        session: Loaded HotspotSession
        image_id: Image to tour
        lines: Iterable of commands (n/p/q)
        out: Where prompts go
    """
    if not session.start_tour(image_id):
        out(_("This image has no hotspots to tour"))
        return False
    print_step(session.current_tour_step(), out)
    for line in lines:
        action = COMMANDS.get(line.strip().lower())
        if action is None:
            out(_("Use n (next), p (previous) or q (quit)"))
            continue
        getattr(session, action)()
        step = session.current_tour_step()
        if step is None:
            break
        print_step(step, out)
    session.exit_tour()
    return True


def command(subparser):
    subparser.add_argument("image_id")

    def handle(args):
        from hotspot_tour.cli.common import open_session, require_image

        session = open_session(args)
        require_image(session, args.image_id)
        run_tour(session, args.image_id, sys.stdin)

    return handle
