"""
Example generating a world from a preset and summarizing it.
"""

from hexworld import BiomeType, configure_logging, generate_world, list_presets


def main():
    configure_logging(level="WARNING")

    seed = "world_demo"
    radius = 40

    for preset in list_presets():
        result = generate_world(radius, preset, seed=seed)
        stats = result.statistics

        print(f"\n=== {preset} (seed={result.seed}, radius={radius}) ===")
        print(f"Tiles: {stats.total_tiles}")
        print(
            f"Land: {stats.land_tiles} ({stats.actual_land_fraction:.1%}, "
            f"target {stats.target_land_fraction:.1%})"
        )
        print(f"Sea level: {result.sea_level:.3f}")
        print(f"Rivers: {stats.primary_river_tiles} -> {stats.river_tiles} after refinement")
        print(f"Lakes: {stats.lake_count}  Coastal: {stats.coastal_tiles}  Resources: {stats.resource_tiles}")
        print(
            f"Temperature: {stats.temperature_range[0]:.2f}-{stats.temperature_range[1]:.2f}  "
            f"Precipitation: {stats.precipitation_range[0]:.2f}-{stats.precipitation_range[1]:.2f}"
        )

        print("Biomes:")
        for name, count in sorted(stats.biome_counts.items(), key=lambda x: -x[1]):
            print(f"  {name:28s} {count:6d}")

        forests = result.tiles_with_biome(BiomeType.TEMPERATE_DECIDUOUS_FOREST)
        if forests:
            best = max(forests, key=lambda t: t.soil_fertility)
            print(f"Most fertile deciduous forest: {tuple(best.coord)} fertility={best.soil_fertility:.2f}")


if __name__ == "__main__":
    main()
