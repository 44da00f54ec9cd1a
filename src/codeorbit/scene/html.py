"""
HTML Scene Viewer.

Writes a rendered frame into a standalone three.js page: node spheres
with their colours and emissive levels, the edge lines, floating labels,
orbit controls with damping and the group auto-rotation.
"""

import json
import re
import webbrowser
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from ..config import (
    CAMERA_DAMPING,
    CAMERA_MAX_DISTANCE,
    CAMERA_MIN_DISTANCE,
    CAMERA_ROTATE_SPEED,
    CAMERA_ZOOM_SPEED,
)
from .renderer import RenderFrame

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>__TITLE__</title>
    <style>
        :root {
            --bg-base: #0a0a0a;
            --bg-elevated: #111111;
            --border-subtle: #262626;
            --text-primary: #fafafa;
            --text-secondary: #a1a1aa;
            --font-sans: -apple-system, BlinkMacSystemFont, "Segoe UI", "Inter", Roboto, sans-serif;
            --font-mono: "SF Mono", "Fira Code", monospace;
        }
        * { box-sizing: border-box; }
        body {
            margin: 0;
            height: 100vh;
            overflow: hidden;
            background: var(--bg-base);
            color: var(--text-primary);
            font-family: var(--font-sans);
        }
        #scene { position: absolute; inset: 0; }
        .panel {
            position: absolute;
            background: var(--bg-elevated);
            border: 1px solid var(--border-subtle);
            border-radius: 6px;
            padding: 10px 12px;
            font-size: 12px;
        }
        #legend { left: 16px; bottom: 16px; }
        #legend .row { display: flex; align-items: center; gap: 8px; margin: 2px 0; }
        #legend .swatch { width: 10px; height: 10px; border-radius: 50%; }
        #info { right: 16px; top: 16px; min-width: 200px; display: none; }
        #info .id { font-family: var(--font-mono); color: var(--text-secondary); }
        #empty {
            position: absolute; inset: 0;
            display: none; align-items: center; justify-content: center;
            color: var(--text-secondary); font-size: 14px;
        }
        .label {
            color: var(--text-primary);
            font-size: 11px;
            padding: 2px 6px;
            background: rgba(17, 17, 17, 0.8);
            border-radius: 4px;
            pointer-events: none;
            white-space: nowrap;
        }
    </style>
    <script type="importmap">
    {
        "imports": {
            "three": "https://unpkg.com/three@0.160.0/build/three.module.js",
            "three/addons/": "https://unpkg.com/three@0.160.0/examples/jsm/"
        }
    }
    </script>
</head>
<body>
    <div id="scene"></div>
    <div id="legend" class="panel"></div>
    <div id="info" class="panel"></div>
    <div id="empty"></div>

    <script type="module">
        import * as THREE from 'three';
        import { OrbitControls } from 'three/addons/controls/OrbitControls.js';
        import { CSS2DRenderer, CSS2DObject } from 'three/addons/renderers/CSS2DRenderer.js';

        const SCENE = __SCENE_DATA__;
        const CONTROLS = __CONTROLS__;

        const container = document.getElementById('scene');
        const empty = document.getElementById('empty');

        if (SCENE.placeholder || SCENE.no_results) {
            empty.style.display = 'flex';
            empty.textContent = SCENE.placeholder ? 'No graph loaded' : 'No nodes match the current filters';
        }

        // ============================================================
        // RENDERERS
        // ============================================================
        const renderer = new THREE.WebGLRenderer({ antialias: true });
        renderer.setPixelRatio(window.devicePixelRatio);
        renderer.setSize(window.innerWidth, window.innerHeight);
        container.appendChild(renderer.domElement);

        const labelRenderer = new CSS2DRenderer();
        labelRenderer.setSize(window.innerWidth, window.innerHeight);
        labelRenderer.domElement.style.position = 'absolute';
        labelRenderer.domElement.style.top = '0';
        labelRenderer.domElement.style.pointerEvents = 'none';
        container.appendChild(labelRenderer.domElement);

        const scene = new THREE.Scene();
        scene.background = new THREE.Color(0x0a0a0a);
        scene.add(new THREE.AmbientLight(0xffffff, 0.6));
        const light = new THREE.PointLight(0xffffff, 1.2);
        light.position.set(10, 10, 10);
        scene.add(light);

        const cam = SCENE.camera;
        const camera = new THREE.PerspectiveCamera(cam.fov, window.innerWidth / window.innerHeight, 0.1, 1000);
        camera.position.set(...cam.position);

        const controls = new OrbitControls(camera, renderer.domElement);
        controls.target.set(...cam.target);
        controls.enableDamping = true;
        controls.dampingFactor = CONTROLS.damping;
        controls.rotateSpeed = CONTROLS.rotateSpeed;
        controls.zoomSpeed = CONTROLS.zoomSpeed;
        controls.minDistance = CONTROLS.minDistance;
        controls.maxDistance = CONTROLS.maxDistance;

        // ============================================================
        // SCENE GROUP
        // ============================================================
        const group = new THREE.Group();
        group.rotation.y = SCENE.group_rotation;
        scene.add(group);

        const meshes = [];
        SCENE.nodes.forEach(n => {
            const color = new THREE.Color(n.color);
            const material = new THREE.MeshStandardMaterial({
                color, emissive: color, emissiveIntensity: n.emissive_intensity,
            });
            const mesh = new THREE.Mesh(new THREE.SphereGeometry(n.radius, 24, 24), material);
            mesh.position.set(...n.position);
            mesh.userData = n;
            group.add(mesh);
            meshes.push(mesh);

            if (n.show_ring) {
                const ring = new THREE.Mesh(
                    new THREE.RingGeometry(n.radius * 1.4, n.radius * 1.7, 32),
                    new THREE.MeshBasicMaterial({ color, side: THREE.DoubleSide, transparent: true, opacity: 0.6 })
                );
                ring.position.set(...n.position);
                group.add(ring);
            }
        });

        SCENE.edges.forEach(e => {
            const geometry = new THREE.BufferGeometry().setFromPoints([
                new THREE.Vector3(...e.source), new THREE.Vector3(...e.target),
            ]);
            group.add(new THREE.Line(geometry, new THREE.LineBasicMaterial({ color: e.color })));
        });

        SCENE.labels.forEach(l => {
            const div = document.createElement('div');
            div.className = 'label';
            div.textContent = l.text;
            const label = new CSS2DObject(div);
            label.position.set(...l.position);
            group.add(label);
        });

        // ============================================================
        // LEGEND & INFO
        // ============================================================
        const legend = document.getElementById('legend');
        if (!SCENE.show_legend || !SCENE.legend.length) {
            legend.style.display = 'none';
        }
        SCENE.legend.forEach(item => {
            const row = document.createElement('div');
            row.className = 'row';
            const swatch = document.createElement('span');
            swatch.className = 'swatch';
            swatch.style.background = item.color;
            const text = document.createElement('span');
            text.textContent = `${item.type} (${item.count})`;
            row.append(swatch, text);
            legend.appendChild(row);
        });

        const info = document.getElementById('info');
        const raycaster = new THREE.Raycaster();
        const pointer = new THREE.Vector2();

        renderer.domElement.addEventListener('click', event => {
            pointer.x = (event.clientX / window.innerWidth) * 2 - 1;
            pointer.y = -(event.clientY / window.innerHeight) * 2 + 1;
            raycaster.setFromCamera(pointer, camera);
            const hits = raycaster.intersectObjects(meshes);
            if (!hits.length) {
                info.style.display = 'none';
                return;
            }
            const n = hits[0].object.userData;
            info.style.display = 'block';
            const title = document.createElement('strong');
            title.textContent = n.node_id;
            const kind = document.createElement('div');
            kind.className = 'id';
            kind.textContent = n.type_label;
            info.replaceChildren(title, kind);
        });

        window.addEventListener('resize', () => {
            camera.aspect = window.innerWidth / window.innerHeight;
            camera.updateProjectionMatrix();
            renderer.setSize(window.innerWidth, window.innerHeight);
            labelRenderer.setSize(window.innerWidth, window.innerHeight);
        });

        // ============================================================
        // LOOP
        // ============================================================
        const clock = new THREE.Clock();
        function animate() {
            requestAnimationFrame(animate);
            group.rotation.y += SCENE.rotation_speed * clock.getDelta();
            controls.update();
            renderer.render(scene, camera);
            labelRenderer.render(scene, camera);
        }
        animate();
    </script>
</body>
</html>
"""


def _json_default(obj: Any) -> Any:
    """JSON serializer for objects not serializable by default json code"""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Type {type(obj)} not serializable")


def _legend(frame: RenderFrame) -> list:
    counts: Dict[str, int] = {}
    colors: Dict[str, str] = {}
    for primitive in frame.nodes:
        counts[primitive.type_label] = counts.get(primitive.type_label, 0) + 1
        colors.setdefault(primitive.type_label, primitive.color)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{"type": t, "count": c, "color": colors[t]} for t, c in ordered]


def frame_to_dict(
    frame: RenderFrame,
    rotation_speed: float = 0.0,
    show_legend: bool = True,
) -> Dict[str, Any]:
    data = asdict(frame)
    data["legend"] = _legend(frame)
    data["rotation_speed"] = rotation_speed
    data["show_legend"] = show_legend
    return data


_PLACEHOLDER = re.compile(r"__(TITLE|SCENE_DATA|CONTROLS)__")


def _script_json(value: Any) -> str:
    """JSON that is safe inside an inline <script> element."""
    text = json.dumps(value, default=_json_default)
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def generate_html(
    frame: RenderFrame,
    title: str = "CodeOrbit",
    rotation_speed: float = 0.0,
    show_legend: bool = True,
) -> str:
    """
    Generate the HTML content for a rendered frame.

    Placeholders are filled in a single pass so producer strings that look
    like a placeholder are never substituted again.
    """
    values = {
        "TITLE": _escape(title),
        "SCENE_DATA": _script_json(frame_to_dict(frame, rotation_speed, show_legend)),
        "CONTROLS": _script_json({
            "damping": CAMERA_DAMPING,
            "rotateSpeed": CAMERA_ROTATE_SPEED,
            "zoomSpeed": CAMERA_ZOOM_SPEED,
            "minDistance": CAMERA_MIN_DISTANCE,
            "maxDistance": CAMERA_MAX_DISTANCE,
        }),
    }
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], HTML_TEMPLATE)


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def write_html(
    frame: RenderFrame,
    output_path: str = "codeorbit.html",
    title: str = "CodeOrbit",
    rotation_speed: float = 0.0,
    show_legend: bool = True,
    open_browser: bool = False,
) -> str:
    """
    Write the viewer page and optionally open it in the browser.
    """
    html_content = generate_html(frame, title, rotation_speed, show_legend)
    out_file = Path(output_path)
    out_file.write_text(html_content, encoding="utf-8")

    if open_browser:
        webbrowser.open(out_file.resolve().as_uri())

    return str(out_file)
