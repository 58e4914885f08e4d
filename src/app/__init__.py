"""App: coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: entidades de conversa (imutáveis)
- use_cases/: orquestrador inbound, gestão de conversas, envio outbound
- services/: serviços de aplicação (horário de atendimento)
- infra/: implementações concretas de IO (stores, OpenAI, Twilio, secrets)
- protocols/: contratos/interfaces
- observability/: correlation id e métricas via logs

Padrão: app executa; api adapta; ai decide; utils apoia.
"""
