"""
Integration tests for the retry engine.

Test components together with real time:
- Retry timing with time.sleep (marked with @pytest.mark.slow)
- Async delays with asyncio.sleep and a live event loop
"""
