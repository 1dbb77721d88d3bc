"""
Config Dialog for the Defrag Map Screen Saver

Minimal, dark-themed widgets drawn directly with pygame. The saver has
no persisted settings yet, so the dialog only says so and closes.
"""

import pygame


# Theme colors
THEME = {
    "bg": (18, 18, 24),
    "text": (180, 185, 195),
    "text_bright": (230, 235, 245),
    "button": (40, 42, 55),
    "button_hover": (55, 58, 75),
}

DIALOG_TITLE = "Defrag Map Screen Saver - Config"
DIALOG_MESSAGE = "Currently visual-only with default settings."
DIALOG_SIZE = (520, 220)


class Button:
    """Clickable button with label."""

    def __init__(self, x, y, width, height, label, on_click=None):
        self.rect = pygame.Rect(x, y, width, height)
        self.label = label
        self.on_click = on_click
        self.hovered = False

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                if self.on_click:
                    self.on_click()
                return True
        elif event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        return False

    def draw(self, surface, font):
        color = THEME["button_hover"] if self.hovered else THEME["button"]

        pygame.draw.rect(surface, color, self.rect, border_radius=4)

        label_surf = font.render(self.label, True, THEME["text_bright"])
        lx = self.rect.x + (self.rect.width - label_surf.get_width()) // 2
        ly = self.rect.y + (self.rect.height - label_surf.get_height()) // 2
        surface.blit(label_surf, (lx, ly))


class ConfigDialog:
    def __init__(self, width=DIALOG_SIZE[0], height=DIALOG_SIZE[1]):
        self.width = width
        self.height = height
        self.running = True
        self.close_button = Button(16, 60, 120, 28, "Close", on_click=self.close)

    def close(self):
        self.running = False

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            self.close()
        elif event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_RETURN):
            self.close()
        else:
            self.close_button.handle_event(event)

    def run(self):
        pygame.init()
        try:
            screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption(DIALOG_TITLE)
            font = pygame.font.SysFont("segoeui,arial", 14)
            clock = pygame.time.Clock()

            while self.running:
                for event in pygame.event.get():
                    self.handle_event(event)

                screen.fill(THEME["bg"])
                screen.blit(font.render(DIALOG_MESSAGE, True, THEME["text"]), (16, 16))
                self.close_button.draw(screen, font)
                pygame.display.flip()
                clock.tick(30)
        finally:
            pygame.quit()
