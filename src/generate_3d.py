#!/usr/bin/env python3
"""
Block Graph Visualization Generator - 3D Version

Generates a standalone HTML page showing a graph document as 3D boxes:
- One box per block, placed by its own position/rotation/scale
- One box per edge, stretched between its two endpoint blocks
- Two-tone faces, with a distinct colour pair for hadamard blocks
- Orbit controls (rotate, zoom, pan) and a short initial spin

Usage:
    python src/generate_3d.py --input examples/sample_graph.json --output output/html/sample_graph.html
"""

import argparse
import json
import sys
from html import escape
from pathlib import Path
from typing import Optional

from graph_models import GraphSourceError
from graph_scene import Scene


# Face colours in BoxGeometry order: +x, -x, +y, -y, +z, -z
FACE_COLORS = {
    "default": ["#3182ce", "#3182ce", None, None, "#e53e3e", "#e53e3e"],
    "hadamard": ["#63b3ed", "#63b3ed", None, None, "#ecc94b", "#ecc94b"],
}
TRANSPARENT_FACE_OPACITY = 0.4


def generate_html(scene: Scene, title: str) -> str:
    """Generate the HTML page for a loaded scene."""
    payload = scene.to_payload()

    # Keys and kinds must not contain raw "<", ">" or "&" inside the script element
    scene_json = (
        json.dumps(payload)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )
    face_colors_json = json.dumps(FACE_COLORS)

    title = escape(title)
    block_count = len(payload["blocks"])
    edge_count = len(payload["edges"])

    html = f'''<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <link rel="icon" href="data:,">
    <script type="importmap">
    {{
        "imports": {{
            "three": "https://unpkg.com/three@0.160.0/build/three.module.js",
            "three/addons/": "https://unpkg.com/three@0.160.0/examples/jsm/"
        }}
    }}
    </script>
    <style>
        * {{
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, sans-serif;
            background: #0a0a1a;
            overflow: hidden;
        }}
        #animation-wrapper {{
            width: 100vw;
            height: 100vh;
        }}
        .header {{
            position: fixed;
            top: 12px;
            left: 12px;
            color: white;
            background: rgba(26, 54, 93, 0.85);
            padding: 10px 14px;
            border-radius: 6px;
        }}
        .header h1 {{
            font-size: 16px;
            font-weight: 600;
            margin-bottom: 4px;
        }}
        .header p {{
            font-size: 12px;
            opacity: 0.8;
        }}
    </style>
</head>
<body>
    <div class="header">
        <h1>{title}</h1>
        <p>{block_count} blocks, {edge_count} edges</p>
    </div>
    <div id="animation-wrapper"></div>

    <script type="module">
        import * as THREE from 'three';
        import {{ OrbitControls }} from 'three/addons/controls/OrbitControls.js';

        const sceneData = {scene_json};
        const faceColors = {face_colors_json};
        const settings = sceneData.settings;

        let camera, scene, renderer, controls;

        function faceMaterials(variant) {{
            return faceColors[variant].map(color => color === null
                ? new THREE.MeshBasicMaterial({{ color: 0xffffff, transparent: true, opacity: {TRANSPARENT_FACE_OPACITY}, side: THREE.DoubleSide }})
                : new THREE.MeshBasicMaterial({{ color: color, side: THREE.DoubleSide }}));
        }}

        function init() {{
            const target = document.getElementById('animation-wrapper');
            const container = document.createElement('div');
            container.id = 'animation-canvas';
            target.appendChild(container);

            scene = new THREE.Scene();

            renderer = new THREE.WebGLRenderer({{ antialias: true, alpha: true }});
            renderer.setPixelRatio(window.devicePixelRatio);
            renderer.setSize(window.innerWidth, window.innerHeight);
            container.appendChild(renderer.domElement);

            // Lights
            const ambient = new THREE.AmbientLight(0xffffff);
            const hemi = new THREE.HemisphereLight(0xffffff, 1);
            hemi.position.set(...settings.hemisphere_position);
            const spotlight = new THREE.SpotLight(0xffffff, settings.spotlight_intensity);
            spotlight.position.set(...settings.spotlight_position);
            spotlight.castShadow = true;
            scene.add(ambient, hemi, spotlight);

            camera = new THREE.PerspectiveCamera(
                settings.camera_fov, window.innerWidth / window.innerHeight,
                settings.camera_near, settings.camera_far
            );
            camera.position.set(...settings.camera_position);

            // Grid and ground
            const grid = new THREE.GridHelper(settings.grid_size, settings.grid_divisions, 0xff0000, 0xffffff);
            grid.position.set(...settings.grid_position);
            const baseGeo = new THREE.PlaneGeometry(settings.ground_size, settings.ground_size);
            baseGeo.rotateX(-Math.PI / 2);
            const ground = new THREE.Mesh(baseGeo, new THREE.MeshBasicMaterial({{ color: 0x222222, side: THREE.DoubleSide }}));
            ground.position.set(0, settings.ground_y, 0);
            scene.add(grid, ground);

            // One shared geometry, one material set per variant
            const geometry = new THREE.BoxGeometry();
            const materials = {{}};
            for (const variant in faceColors) {{
                materials[variant] = faceMaterials(variant);
            }}

            for (const prim of sceneData.primitives) {{
                const t = prim.transform;
                const object = new THREE.Mesh(geometry, materials[prim.material] || materials['default']);
                object.name = prim.role + ':' + prim.key;
                object.position.set(t.position.x, t.position.y, t.position.z);
                object.rotation.set(t.rotation.x, t.rotation.y, t.rotation.z);
                object.scale.set(t.scale.x, t.scale.y, t.scale.z);
                scene.add(object);
            }}

            controls = new OrbitControls(camera, renderer.domElement);
            controls.addEventListener('change', render);

            window.addEventListener('resize', onWindowResize);

            spin();
        }}

        function onWindowResize() {{
            camera.aspect = window.innerWidth / window.innerHeight;
            camera.updateProjectionMatrix();
            renderer.setSize(window.innerWidth, window.innerHeight);
            render();
        }}

        function render() {{
            renderer.render(scene, camera);
            scene.rotation.y += settings.spin_per_change;
        }}

        function spin() {{
            let id;
            function animate() {{
                id = requestAnimationFrame(animate);
                scene.rotation.y += settings.spin_per_frame;
                renderer.render(scene, camera);
            }}
            animate();
            setTimeout(() => cancelAnimationFrame(id), settings.spin_duration_ms);
        }}

        function dispose() {{
            scene.traverse(obj => {{
                if (obj.geometry) obj.geometry.dispose();
                if (obj.material) {{
                    (Array.isArray(obj.material) ? obj.material : [obj.material]).forEach(m => m.dispose());
                }}
            }});
            scene.clear();
            controls.dispose();
            renderer.dispose();
        }}

        window.disposeScene = dispose;
        init();
    </script>
</body>
</html>'''

    return html


def generate_visualization(
    source_id: str,
    output_path: str,
    data_dir: Optional[str] = None,
    title: Optional[str] = None,
    preserve_sign: bool = False,
) -> str:
    """Generate a 3D block visualization from a graph document."""
    scene = Scene.load(
        source_id,
        data_dir=Path(data_dir) if data_dir else None,
        preserve_sign=preserve_sign,
    )

    print(f"Loaded graph: {len(scene.blocks)} blocks, {len(scene.edges)} edges")

    html = generate_html(scene, title or f"Block Graph - {source_id}")

    # Ensure output directory exists
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(html)

    print(f"Generated 3D visualization: {output_file}")
    return str(output_file)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate 3D block graph visualizations from JSON data"
    )
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Source id of the graph document, relative to the data directory"
    )
    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Path for output HTML file"
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory source ids are resolved against (default: repository data/)"
    )
    parser.add_argument(
        "--title",
        default=None,
        help="Page title"
    )
    parser.add_argument(
        "--preserve-sign",
        action="store_true",
        help="Keep the direction of short negative edges when applying the minimum edge size"
    )

    args = parser.parse_args(argv)

    try:
        generate_visualization(
            source_id=args.input,
            output_path=args.output,
            data_dir=args.data_dir,
            title=args.title,
            preserve_sign=args.preserve_sign,
        )
    except GraphSourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
