from cloudlat import display
from cloudlat.models import ProbeResult, RegionStats


def test_verbose_details_print_result_lines():
    with display.console.capture() as capture:
        display.render_probe_details(
            "eastus",
            ["13.68.128.0", "13.69.0.0"],
            [ProbeResult("13.68.128.0", 31.25), ProbeResult("13.69.0.0")],
        )

    out = capture.get()
    assert "Sampled IPs: 13.68.128.0 13.69.0.0" in out
    assert "  13.68.128.0 31.25\n" in out
    assert "  13.69.0.0 N/A\n" in out


def test_summary_ranks_by_average():
    results = [
        RegionStats("slow", 100.0, 300.0, 200.0, sampled=3, reachable=3),
        RegionStats("dead", sampled=3),
        RegionStats("fast", 5.0, 15.0, 10.0, sampled=3, reachable=3),
    ]

    with display.console.capture() as capture:
        display.render_summary(results)

    out = capture.get()
    assert out.index("fast") < out.index("slow") < out.index("dead")
    assert "Fastest region: fast (10 ms avg)" in out
