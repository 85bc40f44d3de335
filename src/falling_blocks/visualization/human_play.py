from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict, Optional

import pygame

from falling_blocks.game import Action, Difficulty, GameConfig, GameSession
from falling_blocks.game.signals import STATE_CHANGED
from .audio import SoundBoard
from .clock import PygameScheduler
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks")
    p.add_argument("--name", type=str, default="Player")
    p.add_argument("--difficulty", choices=[d.label for d in Difficulty], default="easy")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--mute", action="store_true")
    p.add_argument("--verbose", "-v", action="store_true")
    return p


def run(name: str = "Player", difficulty: str = "easy", cell_size: int = 30,
        seed: Optional[int] = None, mute: bool = False) -> int:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        scheduler = PygameScheduler()
        game = GameSession(GameConfig(random_seed=seed), scheduler=scheduler)
        renderer = Renderer(cell_size=cell_size, font=pygame.font.SysFont(None, 26))
        sounds = SoundBoard(enabled=not mute)
        sounds.attach(game.signals)

        dirty = {"flag": True}

        def mark_dirty(sender, **payload) -> None:
            dirty["flag"] = True

        game.signals.subscribe(STATE_CHANGED, mark_dirty)

        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Falling Blocks")

        game.start(name, difficulty)

        commands: Dict[Action, Callable[[], object]] = {
            Action.LEFT: game.move_left,
            Action.RIGHT: game.move_right,
            Action.ROTATE: game.rotate,
            Action.SOFT_DROP: game.soft_drop,
            Action.HARD_DROP: game.hard_drop,
        }

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r and game.game_over:
                        game.restart()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            commands[action]()

            scheduler.poll()

            if dirty["flag"]:
                renderer.draw(screen, game)
                dirty["flag"] = False

            clock.tick(60)

        game.stop()
        sounds.stop_music()
        print(game.final_report())
        return game.score
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run(args.name, args.difficulty, args.cell_size, args.seed, args.mute)


if __name__ == "__main__":  # pragma: no cover
    main()
