
import logging
import sys

import pygame

from puyo_config import CONFIG, GameConfig
from puyo_engine import EventKind, GameEngine
from puyo_input import HeldKeys, InputController
from puyo_layout import compute_dims
from puyo_render import RenderAssets
from puyo_search import apply_move, think_next_move

logger = logging.getLogger("puyo")

BANNER_MS = 1200


def recreate_window(dims, flags=pygame.DOUBLEBUF):
    try:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags)


def main():
    logging.basicConfig(level=CONFIG["LOG_LEVEL"], format="%(asctime)s %(name)s %(message)s")
    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN, pygame.KEYUP])

    game_cfg = GameConfig(seed=CONFIG["SEED"])
    dims = compute_dims(game_cfg.columns, game_cfg.visible_rows)
    screen = recreate_window(dims)
    pygame.display.set_caption("Chain Puzzle")
    font = pygame.font.SysFont(None, 22)
    big_font = pygame.font.SysFont(None, 42)

    render = RenderAssets(dims, font, game_cfg.dead_cells)
    clock = pygame.time.Clock()

    # the host paces chain passes itself so each clear is visible
    engine = GameEngine(game_cfg, auto_resolve=False)
    engine.start()

    controls = InputController(engine)
    ai_mode = CONFIG["AI_MODE"]
    ai_done = False
    paused = False
    fall_acc = land_acc = chain_acc = ai_acc = 0
    banner, banner_ms = "", 0
    last_chain = 0

    while True:
        dt = clock.tick(60)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if e.type == pygame.KEYDOWN:
                if e.key == pygame.K_r:
                    engine.start(); controls.reset()
                    fall_acc = land_acc = chain_acc = ai_acc = 0
                    banner, last_chain, ai_done = "", 0, False
                    continue
                if e.key == pygame.K_p:
                    paused = not paused; continue
                if e.key == pygame.K_a:
                    ai_mode = not ai_mode; ai_acc = 0
                    controls.reset()
                    continue
                if paused or ai_mode:
                    continue
                if e.key in (pygame.K_UP, pygame.K_x):
                    engine.rotate_cw()
                if e.key == pygame.K_z:
                    engine.rotate_ccw()
                if e.key == pygame.K_SPACE:
                    engine.hard_drop()

        if not paused:
            if engine.resolving:
                chain_acc += dt
                if chain_acc >= CONFIG["CHAIN_STEP_MS"]:
                    chain_acc = 0
                    engine.resolve_step()
            elif engine.piece is not None:
                if ai_mode:
                    ai_acc += dt
                    if not ai_done and ai_acc >= CONFIG["AI_MOVE_DELAY_MS"]:
                        move = think_next_move(engine.snapshot(), beam_width=CONFIG["BEAM_WIDTH"])
                        logger.debug("ai move %s", move)
                        ai_done = True
                        apply_move(engine, move)
                else:
                    keys = pygame.key.get_pressed()
                    controls.update(dt, HeldKeys(keys[pygame.K_LEFT], keys[pygame.K_RIGHT], keys[pygame.K_DOWN]))

                fall_acc += dt
                while engine.piece is not None and fall_acc >= CONFIG["FALL_INTERVAL_MS"]:
                    fall_acc -= CONFIG["FALL_INTERVAL_MS"]
                    engine.step()
                # a resting pair locks after LAND_DELAY_MS; moving it off a ledge resets the wait
                if engine.is_resting():
                    land_acc += dt
                    if land_acc >= CONFIG["LAND_DELAY_MS"]:
                        land_acc = 0
                        engine.confirm_landing()
                else:
                    land_acc = 0

        for ev in engine.drain_events():
            if ev.kind is EventKind.PIECE_SPAWNED:
                ai_done, ai_acc, fall_acc, land_acc = False, 0, 0, 0
            elif ev.kind is EventKind.CHAIN_ENDED:
                if ev.data["chain"] > 1:
                    banner, banner_ms = f"{ev.data['chain']} Chain!", BANNER_MS
                last_chain = ev.data["chain"]
            elif ev.kind is EventKind.ALL_CLEAR:
                banner, banner_ms = "ALL CLEAR!", BANNER_MS
            elif ev.kind is EventKind.SCORE_CHANGED:
                logger.debug("score %d (+%d)", ev.data["total"], ev.data["delta"])

        snap = engine.snapshot()
        render.redraw_static(screen)
        render.draw_grid(screen, snap.grid)
        render.draw_piece(screen, snap.piece)
        render.draw_panel_hud(screen, snap.score, snap.chain if snap.resolving else last_chain,
                              snap.next_pairs, ai_mode)
        if banner_ms > 0:
            banner_ms -= dt
            render.draw_banner(screen, big_font, banner, -60)
        if snap.game_over:
            render.draw_banner(screen, big_font, "GAME OVER (R)")
        if paused:
            render.draw_banner(screen, big_font, "PAUSED (P)", 40)
        pygame.display.flip()


if __name__ == '__main__':
    main()
