"""pygame + OpenGL window hosting an interactive flyover session."""
from __future__ import annotations

import logging
from typing import Dict, List, Tuple

import pygame
from OpenGL.GL import *  # noqa: F401,F403
from OpenGL.GLU import *  # noqa: F401,F403

from .geometry import MeshData, SceneObject
from .src.gameplay.controls import InputEvent, KeyEvent, PointerLockEvent, PointerMoveEvent, ResizeEvent
from .src.gameplay.world import FrameView

LOGGER = logging.getLogger(__name__)


def key_code(key: int) -> str:
    """Translate a pygame key constant to a ``KeyboardEvent.code`` style name."""

    name = pygame.key.name(key)
    if len(name) == 1 and name.isalpha():
        return f"Key{name.upper()}"
    if len(name) == 1 and name.isdigit():
        return f"Digit{name}"
    return name.title().replace(" ", "")


class PygameHost:
    """Owns the window and turns pygame events into session input events."""

    def __init__(self, width: int, height: int, title: str = "Flyover Sandbox", fps: int = 60) -> None:
        pygame.init()
        pygame.display.set_mode((width, height), pygame.DOUBLEBUF | pygame.OPENGL | pygame.RESIZABLE)
        pygame.display.set_caption(title)
        self.size = (width, height)
        self.fps = fps
        self.locked = False
        self.quit_requested = False
        self._clock = pygame.time.Clock()
        LOGGER.info("Opened %dx%d viewer window", width, height)

    def _set_lock(self, locked: bool) -> PointerLockEvent:
        # //1.- Grabbing and hiding the cursor is the desktop equivalent of pointer lock.
        self.locked = locked
        pygame.event.set_grab(locked)
        pygame.mouse.set_visible(not locked)
        return PointerLockEvent(locked=locked)

    def poll_events(self) -> Tuple[InputEvent, ...]:
        self._clock.tick(self.fps)
        events: List[InputEvent] = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit_requested = True
            elif event.type == pygame.MOUSEBUTTONDOWN and not self.locked:
                events.append(self._set_lock(True))
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                # //2.- Escape releases the pointer first and quits only from free-look.
                if self.locked:
                    events.append(self._set_lock(False))
                else:
                    self.quit_requested = True
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                events.append(KeyEvent(code=key_code(event.key), pressed=event.type == pygame.KEYDOWN))
            elif event.type == pygame.MOUSEMOTION and self.locked:
                dx, dy = event.rel
                events.append(PointerMoveEvent(dx=float(dx), dy=float(dy)))
            elif event.type == pygame.VIDEORESIZE:
                self.size = (event.w, event.h)
                events.append(ResizeEvent(width=event.w, height=event.h))
        return tuple(events)

    def close(self) -> None:
        pygame.quit()


class PygameRenderer:
    """Immediate-mode OpenGL renderer; static meshes are compiled to display lists once."""

    def __init__(self, width: int, height: int) -> None:
        self._lists: Dict[int, int] = {}
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_LIGHTING)
        glEnable(GL_LIGHT0)
        glEnable(GL_LIGHT1)
        glEnable(GL_COLOR_MATERIAL)
        glColorMaterial(GL_FRONT_AND_BACK, GL_AMBIENT_AND_DIFFUSE)
        glShadeModel(GL_FLAT)
        glEnable(GL_FOG)
        glFogi(GL_FOG_MODE, GL_LINEAR)
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        glViewport(0, 0, width, height)

    def _compile(self, mesh: MeshData, color, vertex_colors: bool) -> int:
        key = id(mesh)
        if key in self._lists:
            return self._lists[key]
        normals = mesh.face_normals()
        handle = glGenLists(1)
        glNewList(handle, GL_COMPILE)
        glBegin(GL_TRIANGLES)
        for triangle, normal in zip(mesh.triangles, normals):
            glNormal3f(*normal)
            for index in triangle:
                if vertex_colors and mesh.colors is not None:
                    glColor3f(*mesh.colors[index])
                else:
                    glColor4f(*color)
                glVertex3f(*mesh.vertices[index])
        glEnd()
        glEndList()
        self._lists[key] = handle
        return handle

    def _draw(self, obj: SceneObject) -> None:
        material = obj.material
        glPushMatrix()
        glMultMatrixf(obj.transform.matrix().T.astype("float32"))
        if obj.mesh.triangle_count:
            if material.unlit:
                glDisable(GL_LIGHTING)
            if not material.fog:
                glDisable(GL_FOG)
            if material.transparent:
                glEnable(GL_BLEND)
                glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
                glDepthMask(GL_FALSE)
            if material.double_sided:
                glDisable(GL_CULL_FACE)
            else:
                glEnable(GL_CULL_FACE)
                glCullFace(GL_FRONT if material.back_side else GL_BACK)
            color = (*material.color, material.opacity)
            glCallList(self._compile(obj.mesh, color, material.vertex_colors))
            glDepthMask(GL_TRUE)
            glDisable(GL_BLEND)
            glEnable(GL_LIGHTING)
            glEnable(GL_FOG)
        for child in obj.children:
            self._draw(child)
        glPopMatrix()

    def render(self, frame: FrameView) -> None:
        atmosphere = frame.world.sky.atmosphere
        glClearColor(*atmosphere.background, 1.0)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        glFogfv(GL_FOG_COLOR, (*atmosphere.fog.color, 1.0))
        glFogf(GL_FOG_START, atmosphere.fog.near)
        glFogf(GL_FOG_END, atmosphere.fog.far)
        glMatrixMode(GL_PROJECTION)
        glLoadMatrixf(frame.projection.T.astype("float32"))
        glMatrixMode(GL_MODELVIEW)
        glLoadMatrixf(frame.camera_pose.view_matrix().T.astype("float32"))
        # //3.- Light 0 is the ambient fill, light 1 the directional sun.
        ambient = atmosphere.ambient
        glLightfv(GL_LIGHT0, GL_AMBIENT, (*(c * ambient.intensity for c in ambient.color), 1.0))
        glLightfv(GL_LIGHT0, GL_DIFFUSE, (0.0, 0.0, 0.0, 1.0))
        sun = atmosphere.sun
        glLightfv(GL_LIGHT1, GL_POSITION, (*sun.position, 0.0))
        glLightfv(GL_LIGHT1, GL_DIFFUSE, (*(min(1.0, c * sun.intensity) for c in sun.color), 1.0))
        for obj in frame.world.scene_objects():
            self._draw(obj)
        pygame.display.flip()
