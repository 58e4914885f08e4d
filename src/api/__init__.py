"""API: camada de borda HTTP.

Responsabilidades:
- Receber requests (JSON síncrono e webhook do Twilio)
- Validar assinaturas e extrair payloads
- Traduzir exceções de domínio para status HTTP

Subpastas:
- normalizers/: conversão de payloads externos → modelos internos
- validators/: validação de requests de provedores
- routes/: endpoints HTTP

NÃO PODE conter: regras de resposta, persistência, orquestração de use cases.
"""
