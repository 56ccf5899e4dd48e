"""HTTP facade over the projector service."""

from projector.models import StructureInstance, pos


def instance_body(structure_id, **fields):
    return StructureInstance(structure_id=structure_id, **fields).model_dump(mode="json")


def block_body(x, y, z, block, **extra):
    return {"pos": {"x": x, "y": y, "z": z}, "token": {"block": block, **extra}}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_list_structures(client, catalog):
    resp = client.get("/api/structures")
    assert resp.status_code == 200
    ids = [s["id"] for s in resp.json()]
    assert len(ids) == len(catalog)
    assert "mekanism:dynamic_tank" in ids


def test_list_structures_by_source(client):
    resp = client.get("/api/structures", params={"source": "bloodmagic"})
    altars = resp.json()
    assert len(altars) == 6
    assert all(s["cycling"] for s in altars[1:])
    assert not altars[0]["cycling"]


def test_structure_detail(client):
    resp = client.get("/api/structures/mekanism:dynamic_tank")
    assert resp.status_code == 200
    body = resp.json()
    assert body["variable"] is True
    assert len(body["sizes"]) == 5
    assert body["default_size_index"] == 2
    assert body["block_count"] == 386


def test_unknown_structure_is_404(client):
    resp = client.get("/api/structures/nope:nothing")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "STRUCTURE_NOT_FOUND"

    resp = client.post("/api/projections", json={"instance": instance_body("nope:nothing")})
    assert resp.status_code == 404


def test_create_projection(client):
    body = {"instance": instance_body("multiblockprojector:single_block", origin=pos(4, 70, -2))}
    resp = client.post("/api/projections", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["layer_count"] == 1
    assert data["block_count"] == 1
    assert data["layers"][0][0]["world"] == {"x": 4, "y": 70, "z": -2}
    assert data["layers"][0][0]["token"]["block"] == "minecraft:iron_block"
    assert data["min_corner"] == data["max_corner"]


def test_projection_lists_acceptable_runes(client):
    body = {"instance": instance_body("bloodmagic:altar_tier_2", origin=pos(0, 64, 0))}
    layers = client.post("/api/projections", json=body).json()["layers"]
    runes = layers[0]
    assert len(runes) == 8
    assert all(len(r["acceptable"]) == 11 for r in runes)
    assert layers[1][0]["acceptable"] == []


def test_validate_complete(client):
    body = {
        "instance": instance_body("multiblockprojector:single_block", origin=pos(0, 64, 0)),
        "world": [block_body(0, 64, 0, "minecraft:iron_block")],
    }
    resp = client.post("/api/projections/validate", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "complete"
    assert data["complete"] is True


def test_validate_reports_incorrect(client):
    body = {
        "instance": instance_body("multiblockprojector:single_block", origin=pos(0, 64, 0)),
        "world": [block_body(0, 64, 0, "minecraft:stone")],
    }
    data = client.post("/api/projections/validate", json=body).json()
    assert data["status"] == "dirty"
    assert data["incorrect"] == [{"x": 0, "y": 64, "z": 0}]
    assert data["regressions"] == [{"x": 0, "y": 64, "z": 0}]


def test_validate_rotated_press_with_any_piston_facing(client, catalog):
    from projector.core.projection import Projection
    from projector.models import Rotation

    instance = StructureInstance(
        structure_id="multiblockprojector:piston_press", rotation=Rotation.QUARTER, origin=pos(10, 64, 10),
    )
    world = []
    for block in Projection.from_instance(instance, catalog).blocks:
        facing = "up" if block.token.block == "minecraft:piston" else block.token.facing and block.token.facing.value
        extra = {"facing": facing} if facing else {}
        world.append(block_body(block.world.x, block.world.y, block.world.z, block.token.block, **extra))

    body = {"instance": instance.model_dump(mode="json"), "world": world}
    assert client.post("/api/projections/validate", json=body).json()["complete"] is True


def test_auto_build(client):
    body = {"instance": instance_body("multiblockprojector:piston_press", origin=pos(0, 64, 0))}
    resp = client.post("/api/projections/auto-build", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["placed"] == 14
    assert len(data["world"]) == 14


def test_auto_build_below_world_floor(client):
    body = {"instance": instance_body("bloodmagic:altar_tier_2", origin=pos(0, -64, 0))}
    data = client.post("/api/projections/auto-build", json=body).json()
    assert data["success"] is False
    assert len(data["failures"]) == 8


def test_preview(client):
    body = {
        "instance": instance_body("bloodmagic:altar_tier_2", origin=pos(0, 64, 0)),
        "world": [block_body(0, 64, 0, "bloodmagic:altar")],
        "cycle_index": 1,
    }
    ghosts = client.post("/api/projections/preview", json=body).json()["ghosts"]
    assert len(ghosts) == 8
    assert {g["token"]["block"] for g in ghosts} == {"bloodmagic:speedrune"}


def test_snapshot_out_of_bounds_is_422(client):
    body = {
        "instance": instance_body("multiblockprojector:single_block"),
        "world": [block_body(0, 1000, 0, "minecraft:stone")],
    }
    resp = client.post("/api/projections/validate", json=body)
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "INVALID_INSTANCE"


def test_service_uses_configured_intervals(service):
    assert service.assistant.cleanup_radius == service.settings.cleanup_radius
    assert service.preview_cycler().interval_ms == 1000


def test_validate_lists_missing_cells(client):
    body = {"instance": instance_body("multiblockprojector:single_block", origin=pos(0, 64, 0))}
    data = client.post("/api/projections/validate", json=body).json()
    assert data["status"] == "clean"
    assert data["missing"] == 1
    assert data["missing_cells"] == [{"x": 0, "y": 64, "z": 0}]


def test_configure_logging_tags_events():
    import structlog

    from projector.utils.logger import APP_NAME, _add_app_name, configure_logging

    configure_logging("WARNING")
    assert _add_app_name in structlog.get_config()["processors"]
    assert _add_app_name(None, "info", {"event": "x"})["app"] == APP_NAME
