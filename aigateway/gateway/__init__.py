"""Multi-provider generation gateway.

Sends one prompt to the first responsive LLM provider in a fixed priority
order and hands back text a strict JSON parser can accept:
  - Provider Adapters (one HTTP protocol per backend)
  - Timeout-Bounded Invoker (per-attempt deadline with real cancellation)
  - Provider Registry (static ordered list, built once at startup)
  - Fallback Sequencer (first non-empty success wins)
  - Response Normalizer (fence / trailing comma / envelope repair)
"""
