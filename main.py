import argparse
import logging
import tkinter as tk
from tkinter import ttk, filedialog, messagebox

from animation import FrameDriver
from config import RenderConfig, positive_int
from geometry import MESH_BUILDERS, OBJModel, make_mesh
from logging_config import setup_logging
from painter import render_frame

logger = logging.getLogger("wireframe.app")


# =========================================================================
# 1. Поверхность и планировщик поверх Tkinter
# =========================================================================

class TkSurface:
    """Поверхность рисования на tk.Canvas."""

    def __init__(self, canvas, width, height):
        self.canvas = canvas
        self._width = width
        self._height = height

    @property
    def width(self):
        w = self.canvas.winfo_width()
        # До первого отображения окна winfo_width возвращает 1
        return w if w >= 10 else self._width

    @property
    def height(self):
        h = self.canvas.winfo_height()
        return h if h >= 10 else self._height

    def clear(self, color):
        self.canvas.delete('all')
        self.canvas.create_rectangle(0, 0, self.width, self.height, fill=color, outline='')

    def fill_polygon(self, points, color):
        coords = [c for p in points for c in p]
        self.canvas.create_polygon(*coords, fill=color, outline='')

    def line(self, p1, p2, color, width):
        self.canvas.create_line(p1[0], p1[1], p2[0], p2[1], fill=color, width=width)


class TkScheduler:
    """Планировщик кадров на root.after."""

    def __init__(self, root):
        self.root = root

    def schedule(self, callback, delay_ms):
        self.root.after(delay_ms, callback)


# =========================================================================
# 2. Приложение
# =========================================================================

class App:
    def __init__(self, root, config: RenderConfig, mesh=None):
        self.root = root
        self.root.title('Вращающаяся модель — алгоритм художника')
        self.config = config

        self.model_var = tk.StringVar(value='Гексаэдр (куб)')
        self.cull_var = tk.BooleanVar(value=config.enable_culling)
        self.occlusion_var = tk.BooleanVar(value=config.enable_occlusion)
        self.shade_var = tk.BooleanVar(value=config.shade_faces)
        self.vertices_var = tk.BooleanVar(value=config.show_vertices)

        if mesh is None:
            mesh = make_mesh(self.model_var.get())
        else:
            self.model_var.set('(Загружено из OBJ)')
        self.set_mesh(mesh)

        top = ttk.Frame(root)
        top.pack(side=tk.TOP, fill=tk.X, padx=8, pady=8)

        ttk.Label(top, text='Модель:').pack(side=tk.LEFT)
        self.model_box = ttk.Combobox(
            top,
            textvariable=self.model_var,
            values=list(MESH_BUILDERS.keys()),
            state='readonly',
            width=18,
        )
        self.model_box.pack(side=tk.LEFT, padx=(6, 12))
        self.model_box.bind('<<ComboboxSelected>>', lambda e: self.rebuild_model())

        ttk.Button(top, text='Сохранить OBJ', command=self.save_obj).pack(side=tk.RIGHT)
        ttk.Button(top, text='Загрузить OBJ', command=self.load_obj).pack(side=tk.RIGHT, padx=(0, 6))

        # Панель переключателей конвейера
        opts = ttk.LabelFrame(root, text='Отрисовка')
        opts.pack(side=tk.TOP, fill=tk.X, padx=8, pady=(0, 8))
        for text, var in (
            ('Отсечение нелицевых граней', self.cull_var),
            ('Перекрытие (заливка фоном)', self.occlusion_var),
            ('Затенение граней', self.shade_var),
            ('Вершины', self.vertices_var),
        ):
            ttk.Checkbutton(opts, text=text, variable=var,
                            command=self.apply_options).pack(side=tk.LEFT, padx=6, pady=4)

        self.canvas = tk.Canvas(root, bg=config.background,
                                width=config.width, height=config.height,
                                highlightthickness=0)
        self.canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        self.surface = TkSurface(self.canvas, config.width, config.height)
        self.driver = FrameDriver(self.redraw, TkScheduler(root), config)
        self.driver.start()

    def set_mesh(self, mesh):
        """Делает модель текущей; на экран идёт её копия, вписанная в model_radius."""
        self.source = mesh
        self.model = mesh.fit(self.config.model_radius)
        self.model.clears_camera(self.config.depth_offset)

    def rebuild_model(self):
        self.set_mesh(make_mesh(self.model_var.get()))

    def apply_options(self):
        """Переносит состояние флажков в настройки рендеринга."""
        self.config.enable_culling = self.cull_var.get()
        self.config.enable_occlusion = self.occlusion_var.get()
        self.config.shade_faces = self.shade_var.get()
        self.config.show_vertices = self.vertices_var.get()

    def redraw(self, angle):
        render_frame(self.model, angle, self.surface, self.config)

    def load_obj(self):
        """Загрузка модели из OBJ файла"""
        filename = filedialog.askopenfilename(
            title="Открыть OBJ файл",
            filetypes=[("OBJ файлы", "*.obj"), ("Все файлы", "*.*")]
        )
        if not filename:
            return

        obj_model = OBJModel()
        if obj_model.load_from_file(filename):
            self.set_mesh(obj_model.mesh)
            self.model_var.set('(Загружено из OBJ)')
        else:
            messagebox.showerror("Ошибка", f"Не удалось загрузить модель из {filename}")

    def save_obj(self):
        """Сохранение текущей модели в OBJ файл"""
        filename = filedialog.asksaveasfilename(
            title="Сохранить OBJ файл",
            defaultextension=".obj",
            filetypes=[("OBJ файлы", "*.obj"), ("Все файлы", "*.*")]
        )
        if not filename:
            return

        if not OBJModel(self.source).save_to_file(filename):
            messagebox.showerror("Ошибка", f"Не удалось сохранить модель в {filename}")


# =========================================================================
# 3. Командная строка
# =========================================================================

def build_parser():
    parser = argparse.ArgumentParser(description='Вращающаяся каркасная модель (алгоритм художника)')
    parser.add_argument('model', nargs='?', help='OBJ файл; без него показывается куб')
    parser.add_argument('--fps', type=positive_int, default=None)
    parser.add_argument('--speed', dest='rotation_speed', type=float, default=None,
                        help='скорость вращения, рад/с')
    parser.add_argument('--depth', dest='depth_offset', type=float, default=None,
                        help='перенос модели вдоль оси Z')
    parser.add_argument('--radius', dest='model_radius', type=float, default=None,
                        help='радиус, в который вписывается модель')
    parser.add_argument('--width', type=positive_int, default=None)
    parser.add_argument('--height', type=positive_int, default=None)
    parser.add_argument('--no-cull', dest='enable_culling', action='store_false', default=None)
    parser.add_argument('--no-occlusion', dest='enable_occlusion', action='store_false', default=None)
    parser.add_argument('--shade', dest='shade_faces', action='store_true', default=None)
    parser.add_argument('--vertices', dest='show_vertices', action='store_true', default=None)
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', default=None)
    parser.add_argument('--trace-frames', action='store_true',
                        help='писать в журнал статистику каждого кадра')
    return parser


def main(argv=None):
    """Запуск GUI приложения"""
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file,
                  trace_frames=args.trace_frames)
    config = RenderConfig.from_args(args)

    mesh = None
    if args.model:
        obj_model = OBJModel()
        if obj_model.load_from_file(args.model):
            mesh = obj_model.mesh
        else:
            logger.error("Модель %s не загружена, используется куб", args.model)

    root = tk.Tk()
    App(root, config, mesh)
    root.mainloop()


if __name__ == '__main__':
    main()
