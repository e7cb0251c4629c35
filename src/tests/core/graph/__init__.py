"""Test suite for the graph system.

1. Builder and executor (test_base.py)
   - Node and edge registration
   - Topological ordering and cycle detection
   - Execution, failure propagation and re-runs

2. Node tests (nodes/)
   - Base node contract
   - Function nodes
   - LLM nodes

3. State management (test_state.py)
   - Typed access and structured values
   - Locking and isolation

4. End-to-end workflows (test_scenarios.py)
   - Linear chains, tool dispatch and endpoint failures

5. Visualization (test_viz.py)
"""
