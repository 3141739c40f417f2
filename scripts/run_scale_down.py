import logging
import sys

from fleet_scaledown.fleet.policy import resolve_delete_priority_func
from fleet_scaledown.fleet.selection import rank_machines
from fleet_scaledown.preprocessing.loaders import load_scenario
from fleet_scaledown.scaledown import select_machines_for_scale_down


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    path = sys.argv[1] if len(sys.argv) > 1 else "data/v1/scenarios/baseline.json"
    scenario = load_scenario(path)

    print("Machines:", len(scenario.fleet.machines), ", Replicas:", scenario.replicas,
          ", To delete:", scenario.n_to_delete)
    print("Delete policy:", scenario.delete_policy or "(default)")
    print()

    priority_func = resolve_delete_priority_func(scenario.delete_policy)
    ranked = rank_machines(scenario.fleet.machines, priority_func, now=scenario.evaluated_at)

    print("Ranking (deleted first at the top):")
    for r in ranked:
        print(f"  {r.rank:02d}  {r.machine.name:<24} priority={r.priority:6.2f}")
    print()

    selected = select_machines_for_scale_down(scenario)
    print("Selected for deletion:", [m.name for m in selected])


if __name__ == "__main__":
    main()
