from adoption_threshold import Scenario, ThresholdSearch, UncertaintyMode, parametrization, run_sweep


def report(result):
    for line in result.summary():
        print(f"   {line}")


def run_demo():
    print("=== Running Green Technology Adoption Threshold Demo ===")

    params = parametrization(1)
    print(f"\nParameters: pi={params.monitoring_probability}, tau={params.tax_rate}, "
          f"rho={params.risk_aversion}, ff={params.fixed_fine_component}, "
          f"alpha={params.efficiency_likelihood}")

    # 1. No technological uncertainty
    print("\n1. No technological uncertainty (old cap 100, new cap 50)...")
    result = ThresholdSearch(Scenario(params, UncertaintyMode.NONE, i_max=2400)).run()
    report(result)

    # 2. Partial uncertainty
    print("\n2. Partial uncertainty (new cap 75 or 25, learned after investing)...")
    result = ThresholdSearch(Scenario(params, UncertaintyMode.PARTIAL, i_max=2200)).run()
    report(result)

    # 3. Full uncertainty
    print("\n3. Full uncertainty (one emissions plan for both realizations)...")
    result = ThresholdSearch(Scenario(params, UncertaintyMode.FULL, i_max=2600)).run()
    report(result)

    # 4. Fixed investment cost below the threshold
    print("\n4. Decisions at a fixed investment cost Ii = 1000...")
    comparison = ThresholdSearch(Scenario(params, UncertaintyMode.NONE)).evaluate(1000.0)
    print(f"   Violation level with the old technology = {comparison.old.violation:.4f}")
    print(f"   Violation level with the new technology = {comparison.new.violation:.4f}")
    print(f"   Invest: {comparison.prefers_new}")

    # 5. Risk aversion sweep
    print("\n5. Sweeping risk aversion (partial uncertainty)...")
    df = run_sweep(Scenario(params, UncertaintyMode.PARTIAL, i_max=2200), "risk_aversion", [1, 2, 3])
    print(df[["threshold_lower", "old_violation", "high_cost_violation", "low_cost_violation"]])

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    run_demo()
