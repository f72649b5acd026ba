"""
Interactive CHIP-8 host: pygame window, keyboard keypad and cycle pacing
"""

import argparse
import sys
import time

import jax
import pygame

from chip8vm import Chip8, Quirks, LoadError, chip8_display_to_rgb, create_color_scheme, disassemble
from chip8vm.logging import LEVELS, ConsoleCallback, EmulatorLogger, MetricsCallback
from chip8vm.rendering import COLOR_SCHEMES
from chip8vm.timers import sound_active

# COSMAC VIP keypad laid over the left side of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_x: 0x0, pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_a: 0x7,
    pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_z: 0xA, pygame.K_c: 0xB,
    pygame.K_4: 0xC, pygame.K_r: 0xD, pygame.K_f: 0xE, pygame.K_v: 0xF,
}


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay_height = len(text_lines) * line_height + 8
    overlay_width = max_width + 16

    overlay = pygame.Surface((overlay_width, overlay_height))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def debug_lines(vm):
    state = vm.state
    lines = [
        f"PC: 0x{int(state.pc):03X}  I: 0x{int(state.I):03X}",
        f"DT: {int(state.delay_timer)}  ST: {int(state.sound_timer)}{'  (tone)' if sound_active(state) else ''}",
        f"Last: {disassemble(int(state.instruction))}",
    ]
    for i in range(0, 16, 4):
        lines.append(" ".join(f"V{j:X}:{int(state.V[j]):02X}" for j in range(i, i + 4)))
    return lines


def run_emulator(vm, logger, rom, scale=10, cycle_delay=2.0, color_scheme="classic"):
    """Main window loop: one cycle every ``cycle_delay`` milliseconds."""
    pygame.init()
    screen = pygame.display.set_mode((vm.width * scale, vm.height * scale))
    pygame.display.set_caption("chip8vm")
    font = pygame.font.Font(None, 18)
    on_color, off_color = create_color_scheme(color_scheme)

    running = True
    paused = False
    show_debug = False
    exit_code = 0
    previous = time.perf_counter()

    logger.info("Controls: ESC=Quit, F1=Pause, F2=Reset, F3=Debug")

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_F1:
                    paused = not paused
                elif event.key == pygame.K_F2:
                    vm.reset()
                    vm.load(rom)
                elif event.key == pygame.K_F3:
                    show_debug = not show_debug
                elif event.key in KEY_MAP:
                    vm.press_key(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    vm.release_key(KEY_MAP[event.key])

        now = time.perf_counter()
        if paused or (now - previous) * 1000.0 < cycle_delay:
            continue
        previous = now

        result = vm.cycle()
        if not result.ok:
            exit_code = 1
            running = False

        frame = chip8_display_to_rgb(vm.state.display, scale, on_color, off_color)
        pygame.surfarray.blit_array(screen, frame.transpose(1, 0, 2))
        if show_debug:
            draw_overlay_text(screen, debug_lines(vm), (5, 5), font, alpha=100)
        pygame.display.flip()

    pygame.quit()
    return exit_code


def run_headless(vm, logger, cycles, progress=True):
    """Run a fixed number of cycles without a window."""
    metrics = MetricsCallback()
    vm.callbacks.append(metrics)
    result = vm.run(cycles, progress=progress)
    stats = metrics.get_statistics()
    logger.info(f"Executed {stats['cycles']} cycles")
    for name, entry in list(stats["ops"].items())[:10]:
        logger.info(f"  {name:<10s} {entry['count']:8d} ({entry['share'] * 100:5.1f}%)")
    logger.log_registers(vm.state, level="INFO")
    return 0 if result is None or result.ok else 1


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 program")
    parser.add_argument("rom", help="Path to the program image")
    parser.add_argument("--scale", type=int, default=10, help="Window pixels per CHIP-8 pixel")
    parser.add_argument("--cycle-delay", type=float, default=2.0, help="Milliseconds between cycles")
    parser.add_argument("--colors", default="classic", choices=sorted(COLOR_SCHEMES), help="Color scheme")
    parser.add_argument("--shift-uses-vy", action="store_true", help="8XY6/8XYE shift VY into VX")
    parser.add_argument("--increment-index", action="store_true", help="FX55/FX65 advance I")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the random opcode")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--cycles", type=int, default=10_000, help="Cycles to run when headless")
    parser.add_argument("--trace", action="store_true", help="Log every executed instruction")
    parser.add_argument("--log-level", default="INFO", type=str.upper, choices=LEVELS, help="Console log level")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = EmulatorLogger(log_level="DEBUG" if args.trace else args.log_level)
    vm = Chip8(
        rng=jax.random.PRNGKey(args.seed),
        quirks=Quirks(shift_uses_vy=args.shift_uses_vy, increment_index=args.increment_index),
        callbacks=[ConsoleCallback(logger, trace=args.trace)],
    )

    try:
        vm.load(args.rom)
    except LoadError as e:
        logger.critical(str(e))
        return 1

    if args.headless:
        return run_headless(vm, logger, args.cycles)
    return run_emulator(vm, logger, args.rom, args.scale, args.cycle_delay, args.colors)


if __name__ == "__main__":
    sys.exit(main())
