from collections import Counter

from flexihash.ring import Flexihash

KEYS = [f"object-{i}" for i in range(10000)]


def demo_pick_cache():
    """Map a few objects onto three cache servers."""
    fh = Flexihash().add_targets(["cache-1", "cache-2", "cache-3"])
    for key in ("object-a", "object-b", "object-c"):
        print(f"{key} -> {fh.lookup(key)}")


def demo_relocation():
    """Adding a fourth server only moves the keys it takes over."""
    fh = Flexihash().add_targets(["cache-1", "cache-2", "cache-3"])
    before = {key: fh.lookup(key) for key in KEYS}
    print("spread before:", dict(sorted(Counter(before.values()).items())))

    fh.add_target("cache-4")
    after = {key: fh.lookup(key) for key in KEYS}
    moved = [key for key in KEYS if before[key] != after[key]]
    print("spread after: ", dict(sorted(Counter(after.values()).items())))
    print(f"moved {len(moved)}/{len(KEYS)} keys, all to cache-4: "
          f"{all(after[key] == 'cache-4' for key in moved)}")


def demo_fallback():
    """Write to two replicas; read from the survivor when one goes down."""
    fh = Flexihash().add_targets(["cache-1", "cache-2", "cache-3", "cache-4"])
    primary, secondary = fh.lookup_list("object", 2)
    print(f"object written to {primary} and {secondary}")
    fh.remove_target(primary)
    print(f"{primary} down; object now read from {fh.lookup('object')}")


if __name__ == "__main__":
    demo_pick_cache()
    demo_relocation()
    demo_fallback()
