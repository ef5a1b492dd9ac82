import yaml, json, os, typing as t
from pathlib import Path

VIEWS_PATH = Path(os.getenv("VIEWS_FILE", "config/views.yaml"))
REQUIRED_ENTITIES = ("profiles", "measurements")

class EntityMeta(t.TypedDict, total=False):
    view: str
    maxPageSize: int

class Registry:
    """Maps entity names used by the API to warehouse views."""

    def __init__(self, path: Path | None = None, entities: dict[str, EntityMeta] | None = None):
        self.path = path or VIEWS_PATH
        self.entities_cfg: dict[str, EntityMeta] = dict(entities or {})

    def load_views(self) -> None:
        if not self.path.exists():
            raise RuntimeError(f"View mapping file not found: {self.path}")
        with self.path.open("r", encoding="utf-8") as f:
            if self.path.suffix.lower() in (".yaml", ".yml"):
                cfg = yaml.safe_load(f) or {}
            else:
                cfg = json.load(f)
        ents = cfg.get("entities", {})
        norm: dict[str, EntityMeta] = {}
        for k, v in ents.items():
            if not isinstance(v, dict) or "view" not in v:
                raise RuntimeError(f"Bad entity mapping for {k}: {v}")
            item: EntityMeta = {"view": v["view"]}
            if "maxPageSize" in v:
                item["maxPageSize"] = int(v["maxPageSize"])
            norm[k] = item
        missing = [e for e in REQUIRED_ENTITIES if e not in norm]
        if missing:
            raise RuntimeError(f"View mapping file {self.path} is missing entities: {', '.join(missing)}")
        self.entities_cfg = norm

    def ensure_entity(self, name: str) -> EntityMeta:
        if name not in self.entities_cfg:
            raise KeyError(f"Unknown entity: {name}")
        return self.entities_cfg[name]

    def view(self, name: str) -> str:
        return self.ensure_entity(name)["view"]

    def max_page_size(self, name: str, default: int) -> int:
        return int(self.ensure_entity(name).get("maxPageSize", default))
