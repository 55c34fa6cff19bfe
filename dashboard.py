import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go
from search_benchmark.benchmark import build_shape_sheet, run_timing_comparison
from search_benchmark.data_generator import Shape, generate_sequence
from search_benchmark.searches import Strategy
from search_benchmark.verification import Verifier

st.set_page_config(page_title="Search Strategy Benchmark Dashboard", layout="wide")

st.title("Search Strategy Benchmark Dashboard")
st.markdown("Compare how many guesses linear, binary, line fit and hybrid searches need on sorted sequences of different shapes.")

st.sidebar.header("Configuration")

st.sidebar.subheader("Sequence Shapes")
selected_shapes = st.sidebar.multiselect(
    "Shapes",
    options=[shape.label for shape in Shape],
    default=[Shape.LINEAR.label, Shape.LINEAR_OUTLIER.label],
    help="Distribution pattern of the generated sorted sequences"
)

st.sidebar.subheader("Search Methods")
selected_strategies = []
for strategy in Strategy:
    default = strategy is not Strategy.LINEAR_SCAN
    if st.sidebar.checkbox(strategy.label, value=default, key=f"strategy_{strategy.name}"):
        selected_strategies.append(strategy)

st.sidebar.subheader("Sweep")
max_size = st.sidebar.number_input(
    "Max Sequence Size",
    min_value=2,
    max_value=1000,
    value=200,
    step=50,
    help="Sequences of every size from 1 up to this value are tested"
)
num_runs = st.sidebar.number_input(
    "Runs per Size",
    min_value=1,
    max_value=100,
    value=20,
    help="Number of random trials averaged for every size"
)
seed = st.sidebar.number_input("Seed", min_value=0, value=0, help="Seed for reproducible sweeps")

st.sidebar.subheader("Timing")
run_timing = st.sidebar.checkbox("Run Timing Comparison", value=False)
if run_timing:
    perf_searches = st.sidebar.number_input("Searches per Shape", min_value=100, max_value=100000, value=10000, step=1000)
    perf_size = st.sidebar.number_input("Timing Sequence Size", min_value=2, max_value=100000, value=1000, step=100)

st.sidebar.markdown("---")
run_benchmark = st.sidebar.button("Run Benchmark", type="primary")

if 'sheets' not in st.session_state:
    st.session_state.sheets = None
if 'timings' not in st.session_state:
    st.session_state.timings = None

STRATEGY_COLORS = {
    Strategy.LINEAR_SCAN: '#7f7f7f',
    Strategy.LINE_FIT: '#1f77b4',
    Strategy.LINE_FIT_BLIND: '#17becf',
    Strategy.BINARY_SEARCH: '#ff7f0e',
    Strategy.HYBRID: '#2ca02c',
}


def hex_to_rgba(hex_color, alpha):
    r, g, b = (int(hex_color[i:i + 2], 16) for i in (1, 3, 5))
    return f"rgba({r}, {g}, {b}, {alpha})"


def run_benchmark_pipeline(shapes, strategies):
    """Sweep every selected shape and collect the sheets"""
    progress_bar = st.progress(0)
    status_text = st.empty()

    verifier = Verifier(verbose=False)
    shape_seeds = np.random.SeedSequence(int(seed)).spawn(len(shapes))
    sheets = {}
    for i, shape in enumerate(shapes):
        status_text.text(f"Sweeping {shape.label}...")
        rng = np.random.default_rng(shape_seeds[i])
        sheets[shape] = build_shape_sheet(shape, strategies, int(max_size), int(num_runs), rng, verifier)
        progress_bar.progress((i + 1) / len(shapes))

    timings = None
    if run_timing:
        status_text.text("Timing searches...")
        summaries = run_timing_comparison(strategies, shapes, size=int(perf_size), query_count=int(perf_searches),
                                          seed=int(seed), verbose=False)
        timings = pd.DataFrame([{
            'Method': s.strategy.label,
            'Total Time (s)': s.elapsed,
            'Total Guesses': s.total_guesses,
            'ns / Guess': s.nanoseconds_per_guess,
        } for s in summaries])

    status_text.text("Done.")
    if not verifier.ok:
        st.warning(f"{len(verifier.mismatches)} results disagreed with the linear scan!")
        st.dataframe(pd.DataFrame([{
            'Shape': m.shape, 'Method': m.strategy, 'Query': m.query, 'Reason': m.reason
        } for m in verifier.mismatches]), hide_index=True)

    return sheets, timings


def guesses_figure(shape, sheet, strategies):
    fig = go.Figure()
    sizes = sheet['Sample Count']
    for strategy in strategies:
        color = STRATEGY_COLORS[strategy]
        # min/max band behind the average
        fig.add_trace(go.Scatter(
            x=pd.concat([sizes, sizes[::-1]]),
            y=pd.concat([sheet[f"{strategy.label} Max"], sheet[f"{strategy.label} Min"][::-1]]),
            fill='toself',
            fillcolor=hex_to_rgba(color, 0.15),
            line=dict(width=0),
            hoverinfo='skip',
            showlegend=False,
        ))
        fig.add_trace(go.Scatter(
            x=sizes,
            y=sheet[f"{strategy.label} Avg"],
            mode='lines',
            name=strategy.label,
            line=dict(color=color, width=2),
            hovertemplate=f'{strategy.label}<br>Size: %{{x}}<br>Avg Guesses: %{{y:.2f}}<extra></extra>'
        ))

    fig.update_layout(
        title=f"{shape.label}: Guesses per Search",
        xaxis_title="Sample Count",
        yaxis_title="Guesses",
        height=450,
        hovermode='x unified',
        legend=dict(yanchor="top", y=0.99, xanchor="left", x=0.01)
    )
    return fig


# Run benchmark when button is clicked
if run_benchmark:
    if not selected_shapes or not selected_strategies:
        st.warning("Please select at least one shape and one search method!")
    else:
        shapes = [Shape(label) for label in selected_shapes]
        with st.spinner("Running benchmark..."):
            sheets, timings = run_benchmark_pipeline(shapes, selected_strategies)
            st.session_state.sheets = sheets
            st.session_state.strategies = selected_strategies
            st.session_state.timings = timings

# Display results
if st.session_state.sheets is not None:
    sheets = st.session_state.sheets
    strategies = st.session_state.strategies

    st.markdown("---")
    st.subheader("Guess Counts")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Shapes", len(sheets))
    with col2:
        st.metric("Max Sequence Size", f"{int(max_size):,}")
    with col3:
        st.metric("Runs per Size", int(num_runs))

    tabs = st.tabs([shape.label for shape in sheets])
    for tab, (shape, sheet) in zip(tabs, sheets.items()):
        with tab:
            st.plotly_chart(guesses_figure(shape, sheet, strategies), use_container_width=True)

            sample = generate_sequence(shape, int(max_size), np.random.default_rng(int(seed)))
            seq_fig = go.Figure(go.Scatter(x=list(range(len(sample))), y=sample, mode='lines',
                                           line=dict(color='darkblue', width=2)))
            seq_fig.update_layout(title="Sample Sequence", xaxis_title="Index", yaxis_title="Value", height=300)
            st.plotly_chart(seq_fig, use_container_width=True)

            with st.expander("Sheet"):
                st.dataframe(sheet, use_container_width=True, hide_index=True)
                st.download_button("Download CSV", sheet.to_csv(index=False), file_name=f"{shape.label}.csv",
                                   mime="text/csv", key=f"download_{shape.name}")

    if st.session_state.timings is not None:
        st.markdown("---")
        st.subheader("Timing Comparison")
        timings = st.session_state.timings
        st.dataframe(timings, use_container_width=True, hide_index=True)

        tab1, tab2 = st.tabs(["Total Time", "Time per Guess"])
        with tab1:
            st.bar_chart(timings.set_index('Method')['Total Time (s)'])
        with tab2:
            st.bar_chart(timings.set_index('Method')['ns / Guess'])

else:
    st.info("Configure your benchmark settings in the sidebar and click 'Run Benchmark' to start.")

    st.markdown("""
    ### How to Use

    1. **Select Shapes**: Choose which sequence distributions to generate
    2. **Select Methods**: Choose the search strategies to compare
    3. **Configure the Sweep**: Set the largest sequence size and how many random runs to average per size
    4. **Run Benchmark**: Click the "Run Benchmark" button to start
    5. **Analyze Results**: Compare average guesses per size, with the min/max range shaded

    ### Search Methods

    - **Linear Search**: Reads values front to back. Every result is verified against it
    - **Binary Search**: Bisects the remaining range on every guess
    - **Line Fit**: Fits a line through the current bracket and guesses where the query should be
    - **Line Fit Blind**: Line Fit, also counting the two reads of the first and last values
    - **Hybrid**: Alternates Line Fit guesses with bisection guesses

    The **Linear Outlier** shape is the worst case for Line Fit: a single huge last value makes every
    guess land far too low, so the search creeps forward one value at a time.
    """)
