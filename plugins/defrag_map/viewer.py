"""
Pygame Screen Saver Window for the Defrag Map

Three display modes share one loop:
  run      Full screen, hidden cursor, exits on key / click / real mouse move
  preview  Embedded in the Control Panel thumbnail via SDL_WINDOWID
  window   Resizable developer window, exits on close or Q / ESC

Each frame steps the simulator, paints the returned segments into the
MapSurface, and blits only the rows that changed.
"""

import os
import sys
import time

import pygame

from .simulator import DiskMapSimulator
from .surface import MapSurface
from .settings import (
    get_profile, map_layout, DEFAULT_WINDOW, FONT_NAME, MAP_BORDER,
    MOUSE_JITTER, STATUS_BG, STATUS_SEPARATOR, STATUS_TEXT, TEXT_LEFT,
)


def _preview_client_size(hwnd):
    """Client-area size of the preview parent window, or None off Windows."""
    if not hwnd or sys.platform != "win32":
        return None
    import ctypes
    from ctypes import wintypes

    rect = wintypes.RECT()
    if not ctypes.windll.user32.GetClientRect(wintypes.HWND(hwnd), ctypes.byref(rect)):
        return None
    return max(1, rect.right - rect.left), max(1, rect.bottom - rect.top)


class ScreenSaverViewer:
    def __init__(self, profile="run", preview_handle=0, window_size=None, seed=None):
        self.profile_name = profile
        self.profile = get_profile(profile)
        self.preview_handle = preview_handle
        self.window_size = window_size or DEFAULT_WINDOW
        self.running = True

        if seed is None:
            seed = int(time.time() * 1000) & 0x7FFFFFFF
        self.seed = seed
        self.sim = DiskMapSimulator(seed=seed)

        self.map_surface = None  # MapSurface, rebuilt on every resize
        self._map_pg = None  # pygame.Surface mirroring map_surface.pixels
        self.status_rect = None
        self.map_rect = None

        self._last_mouse = None

    @property
    def exit_on_input(self):
        return self.profile["exit_on_input"]

    def _rebuild_surfaces(self, width, height):
        """Lay out status bar and map, then regenerate the disk for the new size."""
        status, mapr = map_layout(width, height, self.profile)
        self.status_rect = pygame.Rect(status)
        self.map_rect = pygame.Rect(mapr)

        self.sim.reset(self.map_rect.width, self.map_rect.height)
        self.map_surface = MapSurface(self.map_rect.width, self.map_rect.height)
        self.map_surface.full_redraw(self.sim)

        self._map_pg = pygame.Surface(self.map_rect.size)
        self._blit_dirty_rows()

    def _blit_dirty_rows(self):
        dirty = self.map_surface.take_dirty_rows()
        if dirty is None:
            return
        first, last = dirty
        rows = pygame.Rect(0, first, self.map_rect.width, last - first)
        # surfarray is indexed [x, y]
        pygame.surfarray.blit_array(
            self._map_pg.subsurface(rows),
            self.map_surface.pixels[first:last].swapaxes(0, 1),
        )

    def _step_and_paint(self):
        changes = self.sim.step(self.profile["steps_per_frame"])
        if not changes:
            return
        self.map_surface.apply_segments(changes)
        self._blit_dirty_rows()

    def _should_exit_on_mouse(self, pos):
        """First motion only records the position; later ones exit past the jitter."""
        if self._last_mouse is None:
            self._last_mouse = pos
            return False
        dx = abs(pos[0] - self._last_mouse[0])
        dy = abs(pos[1] - self._last_mouse[1])
        return dx + dy > MOUSE_JITTER

    def _handle_event(self, event, screen):
        if event.type == pygame.QUIT:
            self.running = False
            return screen

        if event.type == pygame.VIDEORESIZE:
            if self.profile_name == "window":
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
            self._rebuild_surfaces(*event.size)
            return screen

        if self.exit_on_input:
            if event.type in (pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN):
                self.running = False
            elif event.type == pygame.MOUSEMOTION and self._should_exit_on_mouse(event.pos):
                self.running = False
        elif event.type == pygame.KEYDOWN and self.profile_name == "window":
            if event.key in (pygame.K_q, pygame.K_ESCAPE):
                self.running = False

        return screen

    def _open_display(self):
        if self.profile_name == "preview":
            size = _preview_client_size(self.preview_handle) or (152, 112)
            return pygame.display.set_mode(size, pygame.NOFRAME)
        if self.profile_name == "window":
            screen = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
            pygame.display.set_caption("Defrag Map")
            return screen
        return pygame.display.set_mode((0, 0), pygame.FULLSCREEN)

    def _follow_preview_parent(self, screen):
        """Embedded windows get no resize events; track the parent's client area."""
        size = _preview_client_size(self.preview_handle)
        if size is None or size == screen.get_size():
            return screen
        screen = pygame.display.set_mode(size, pygame.NOFRAME)
        self._rebuild_surfaces(*size)
        return screen

    def _draw(self, screen, font):
        screen.fill((0, 0, 0))

        pygame.draw.rect(screen, STATUS_BG, self.status_rect)
        bottom = self.status_rect.bottom - 1
        pygame.draw.line(screen, STATUS_SEPARATOR, (0, bottom), (screen.get_width(), bottom))

        y = self.profile["text_top"]
        for line in self.sim.get_status_lines():
            screen.blit(font.render(line, True, STATUS_TEXT), (TEXT_LEFT, y))
            y += self.profile["line_height"]
            if y > self.status_rect.bottom - 2:
                break

        screen.blit(self._map_pg, self.map_rect.topleft)
        pygame.draw.rect(screen, MAP_BORDER, self.map_rect.inflate(2, 2), 1)

    def run(self):
        """Main screen saver loop."""
        if self.profile_name == "preview" and self.preview_handle:
            # Must be set before the display is created
            os.environ["SDL_WINDOWID"] = str(self.preview_handle)

        pygame.init()
        try:
            screen = self._open_display()
            if self.exit_on_input:
                pygame.mouse.set_visible(False)

            font = pygame.font.SysFont(FONT_NAME, self.profile["font_size"])
            clock = pygame.time.Clock()

            self._rebuild_surfaces(*screen.get_size())
            print(f"[defrag] {self.profile['name']} {screen.get_width()}x{screen.get_height()} "
                  f"(map {self.map_rect.width}x{self.map_rect.height}, seed {self.seed})")

            while self.running:
                for event in pygame.event.get():
                    screen = self._handle_event(event, screen)

                if not self.running:
                    break
                if self.profile_name == "preview":
                    screen = self._follow_preview_parent(screen)

                self._step_and_paint()
                self._draw(screen, font)
                pygame.display.flip()
                clock.tick(self.profile["fps"])
        finally:
            if self.exit_on_input:
                pygame.mouse.set_visible(True)
            pygame.quit()
