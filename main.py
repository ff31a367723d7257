
import argparse, logging, sys
import pygame
from qrtetris_config import CONFIG
from qrtetris_game import Action, Game, Status
from qrtetris_input import action_for
from qrtetris_layout import compute_dims
from qrtetris_render import RenderAssets, draw_upload_screen
from qrtetris_target import DecodeError, detect_qr

log = logging.getLogger("qrtetris")

POPUP_MS = 3000
MESSAGE_MS = 4000
REJECTED = "Not a QR code image."


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Rebuild a QR code with falling tetrominoes.")
    ap.add_argument("image", nargs="?", help="QR code image to start with")
    ap.add_argument("--seed", type=int, default=CONFIG["SEED"], help="piece sequence seed")
    ap.add_argument("--no-validate", action="store_true", help="skip QR symbol detection")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap.parse_args(argv)


def recreate_window(dims, flags=pygame.DOUBLEBUF):
    try:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags, vsync=1)
    except (TypeError, pygame.error):
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags)


class Notice:
    """Text shown until a deadline in ms (pygame ticks)."""
    def __init__(self):
        self.text = ""
        self.until = 0

    def show(self, text: str, now: int, ms: int):
        self.text, self.until = text, now + ms

    def clear(self):
        self.text, self.until = "", 0

    def current(self, now: int) -> str:
        return self.text if now < self.until else ""


class App:
    """Routes window events into the game and keeps the on-screen notices."""
    def __init__(self, game: Game):
        self.game = game
        self.popup = Notice()
        self.message = Notice()
        self.now = 0
        game.on_complete(lambda _snap: self.popup.show("COMPLETE!", self.now, POPUP_MS))

    def load(self, path: str, now: int) -> bool:
        """Start a session from path; on rejection keep the old one and say so."""
        self.now = now
        try:
            self.game.load(path)
        except DecodeError as e:
            log.warning("rejected %s: %s", path, e)
            self.message.show(REJECTED, now, MESSAGE_MS)
            return False
        # a fresh session can complete inside load(); keep that popup
        if self.game.status is not Status.COMPLETED:
            self.popup.clear()
        self.message.clear()
        return True

    def handle(self, e, now: int) -> bool:
        """Apply one event; True when the window layout must be rebuilt."""
        self.now = now
        if e.type == pygame.DROPFILE:
            return self.load(e.file, now)
        if e.type == pygame.KEYDOWN and e.key == pygame.K_ESCAPE:
            self.game.stop()
            self.popup.clear()
            self.message.clear()
            return True
        action = action_for(e)
        if action is Action.RESET:
            self.popup.clear()
        if action is not None:
            self.game.apply(action)
        return False


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)
    CONFIG["SEED"] = args.seed
    if args.no_validate:
        CONFIG["VALIDATE_QR"] = False

    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN, pygame.DROPFILE])
    pygame.display.set_caption("QR Tetris")
    font = pygame.font.SysFont(None, 24)
    big_font = pygame.font.SysFont(None, 48)
    clock = pygame.time.Clock()

    app = App(Game(detector=detect_qr if CONFIG["VALIDATE_QR"] else None))
    game = app.game

    upload_size = (CONFIG["WINDOW_W"] // 2, CONFIG["WINDOW_H"] // 2)
    screen = pygame.display.set_mode(upload_size)
    render = None
    if args.image:
        app.load(args.image, pygame.time.get_ticks())

    while True:
        clock.tick(CONFIG["FPS"])
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if app.handle(e, pygame.time.get_ticks()):
                render = None
                if game.status is Status.NOT_STARTED:
                    screen = pygame.display.set_mode(upload_size)

        snap = game.tick()
        now = pygame.time.get_ticks()

        if snap.status is Status.NOT_STARTED:
            draw_upload_screen(screen, font, app.message.current(now))
            pygame.display.flip()
            continue

        if render is None:
            dims = compute_dims(len(snap.target))
            screen = recreate_window(dims)
            render = RenderAssets(dims, font)

        render.draw(screen, snap, app.message.current(now))
        popup = app.popup.current(now)
        if popup:
            msg = big_font.render(popup, True, (200, 40, 60))
            d = render.dims
            screen.blit(msg, msg.get_rect(center=(d.board_x + d.board_w // 2, d.board_y + d.board_h // 2)))
        pygame.display.flip()


if __name__ == '__main__':
    main()
